"""
Smoke tests for the demo scenarios and CLI commands.
"""

import sys

import pytest

import cli
from operator_console.demo import run_new_sale_demo, run_status_update_demo
from shared.data_store import DataStore


class TestDemos:
    """The demos run on scratch copies and never touch the source data."""

    def test_new_sale_demo(self, data_dir, data_store: DataStore):
        toasts = run_new_sale_demo(data_dir)

        assert [t.title for t in toasts] == ["Novas vendas!"]
        assert len(data_store.get_orders()) == 4

    def test_status_update_demo(self, data_dir, data_store: DataStore):
        history = run_status_update_demo(data_dir)

        assert [e["status"] for e in history] == ["paid", "paid", "shipped", "delivered"]
        assert data_store.get_order("ord_1").status == "paid"


class TestCli:
    """Tests for CLI commands that run in-process."""

    def test_statuses(self, capsys, monkeypatch):
        monkeypatch.setattr(sys, "argv", ["cli.py", "statuses"])
        cli.main()

        out = capsys.readouterr().out
        assert "Aguardando Pagamento" in out
        assert "Saiu para Entrega" in out
        assert "total: 4, pending: 1, processing: 1, completed: 1" in out
        assert "total: 2, awaiting: 0, in_transit: 1, delivered: 1" in out

    def test_update_order(self, capsys, monkeypatch, data_dir, data_store: DataStore):
        monkeypatch.setattr(sys, "argv", [
            "cli.py", "--data-dir", str(data_dir), "update-order", "ord_2", "paid", "--actor", "Maria",
        ])
        cli.main()

        assert data_store.get_order("ord_2").status_history[-1].actor == "Maria"
        assert "Pago" in capsys.readouterr().out

    def test_update_missing_order_exits(self, monkeypatch, data_dir):
        monkeypatch.setattr(sys, "argv", ["cli.py", "--data-dir", str(data_dir), "update-order", "nope", "paid"])

        with pytest.raises(SystemExit):
            cli.main()

    def test_update_tracking(self, monkeypatch, data_dir, data_store: DataStore):
        monkeypatch.setattr(sys, "argv", [
            "cli.py", "--data-dir", str(data_dir), "update-tracking", "trk_1", "hub", "No centro",
        ])
        cli.main()

        assert data_store.get_tracking("trk_1").history[-1].location == "Canoas - RS"
