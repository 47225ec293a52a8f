from core.admin_gate import AdminGate


def test_from_env(monkeypatch):
    monkeypatch.setenv("SONGBOOK_ADMIN_USER", " admin ")
    monkeypatch.setenv("SONGBOOK_ADMIN_PASS", "s3cret")
    gate = AdminGate.from_env()
    assert gate.configured
    assert gate.user == "admin"


def test_unconfigured_refuses_everything(monkeypatch):
    monkeypatch.delenv("SONGBOOK_ADMIN_USER", raising=False)
    monkeypatch.delenv("SONGBOOK_ADMIN_PASS", raising=False)
    gate = AdminGate.from_env()
    assert not gate.configured
    assert not gate.check("", "")
    assert not gate.check("admin", "admin")


def test_check():
    gate = AdminGate(user="admin", password="s3cret")
    assert gate.check("admin", "s3cret")
    assert gate.check(" admin ", "s3cret")
    assert not gate.check("admin", "wrong")
    assert not gate.check("Admin", "s3cret")
    assert not gate.check(None, None)
