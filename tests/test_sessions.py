import threading

from netlabs.codes import LoginStatus
from netlabs.sessions import Session, SessionRegistry


def make_registry():
    registry = SessionRegistry()
    registry.add(4, "", 0, "admin", LoginStatus.LOGGED_IN)
    registry.add(5, "", 0, "tungbt", LoginStatus.LOGGED_IN)
    return registry


def test_add_returns_session_and_is_findable():
    registry = SessionRegistry()
    session = registry.add(7, "127.0.0.1", 5000, "admin", LoginStatus.LOGGED_IN)
    assert session == Session(7, "127.0.0.1", 5000, "admin", LoginStatus.LOGGED_IN)
    assert registry.find_by_socket(7) is session
    assert registry.find_by_username("admin") is session


def test_find_missing_returns_none():
    registry = make_registry()
    assert registry.find_by_socket(99) is None
    assert registry.find_by_username("ghost") is None


def test_usernames_newest_first():
    registry = make_registry()
    assert registry.usernames() == ["tungbt", "admin"]
    assert len(registry) == 2


def test_find_by_username_prefers_newest():
    registry = make_registry()
    registry.add(9, "", 0, "admin", LoginStatus.LOGGED_IN)
    assert registry.find_by_username("admin").socket_id == 9


def test_remove_by_socket():
    registry = make_registry()
    removed = registry.remove_by_socket(4)
    assert removed.username == "admin"
    assert registry.find_by_socket(4) is None
    assert registry.usernames() == ["tungbt"]
    assert registry.remove_by_socket(4) is None


def test_clear_empties_registry():
    registry = make_registry()
    registry.clear()
    assert registry.usernames() == []
    assert len(registry) == 0


def test_online_list_format():
    registry = make_registry()
    assert registry.online_list() == " tungbt admin "


def test_online_list_empty_is_single_space():
    assert SessionRegistry().online_list() == " "


def test_online_list_splits_back_to_usernames():
    registry = make_registry()
    assert registry.online_list().split() == registry.usernames()


def test_format_table_has_header_and_rows():
    registry = make_registry()
    lines = registry.format_table().splitlines()
    assert lines[0] == "Socket ID\tClient Address\t\t\tUsername\tLogin Status"
    assert len(lines) == 3
    assert lines[1].split("\t\t") == ["5", "", "tungbt", str(int(LoginStatus.LOGGED_IN))]


def test_concurrent_adds_are_all_kept():
    registry = SessionRegistry()

    def worker(base):
        for offset in range(50):
            registry.add(base + offset, "", 0, f"user{base + offset}", LoginStatus.LOGGED_IN)

    threads = [threading.Thread(target=worker, args=(n * 100,)) for n in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert len(registry) == 200
    assert len(set(registry.usernames())) == 200