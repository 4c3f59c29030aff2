"""Tests for team sign-in."""

import sqlite3

import pytest

import db
from auth import CONN_KEY, USER_KEY, current_user, login, logout
from errors import ValidationError


def test_login_without_team_password(state) -> None:
    assert login(state, "  Ana ", expected=None) == "Ana"
    assert current_user(state) == "Ana"


def test_login_requires_name(state) -> None:
    with pytest.raises(ValidationError):
        login(state, " ", expected=None)
    assert current_user(state) is None


def test_login_checks_team_password(state) -> None:
    with pytest.raises(ValidationError, match="Incorrect team password"):
        login(state, "Ana", "wrong", expected="trowel")

    assert login(state, "Ana", "trowel", expected="trowel") == "Ana"


def test_logout_clears_session(state) -> None:
    login(state, "Ana", expected=None)
    state["chat_messages"] = ["hi"]

    logout(state)

    assert USER_KEY not in state
    assert state == {}


def test_logout_closes_store_connection(state, tmp_path) -> None:
    conn = db.get_conn(tmp_path / "sitescan.db")
    state[CONN_KEY] = conn
    login(state, "Ana", expected=None)

    logout(state)

    with pytest.raises(sqlite3.ProgrammingError):
        conn.execute("SELECT 1")
