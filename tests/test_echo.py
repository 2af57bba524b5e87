import socket
import threading

import pytest

from netlabs.echo import client_main, handle_connection, split_lines


@pytest.mark.parametrize(
    "data, expected",
    [
        (b"hello\r\nworld\r\n", [b"hello", b"world"]),
        (b"a\nb", [b"a", b"b"]),
        (b"single", [b"single"]),
        (b"\r\n\r\n", []),
        (b"", []),
    ],
)
def test_split_lines(data, expected):
    assert split_lines(data) == expected


def test_split_lines_pieces_hold_no_breaks():
    pieces = split_lines(b"x\r\r\ny\n\nz\r")
    assert pieces == [b"x", b"y", b"z"]
    assert all(b"\r" not in p and b"\n" not in p for p in pieces)


def _read_all(sock):
    chunks = []
    while True:
        data = sock.recv(1024)
        if not data:
            return b"".join(chunks)
        chunks.append(data)


def test_handle_connection_echoes_lines_and_closes():
    server_side, client_side = socket.socketpair()
    with client_side:
        client_side.sendall(b"one\r\ntwo\r\n")
        client_side.shutdown(socket.SHUT_WR)
        count = handle_connection(server_side)
        assert count == 2
        assert _read_all(client_side) == b"onetwo"
    assert server_side.fileno() == -1


def test_handle_connection_reports_disconnect(capsys):
    server_side, client_side = socket.socketpair()
    client_side.close()
    assert handle_connection(server_side) == 0
    assert "Client disconnected." in capsys.readouterr().out


def test_client_main_round_trip(monkeypatch, capsys):
    listener = socket.create_server(("127.0.0.1", 0))
    port = listener.getsockname()[1]
    results = []

    def run():
        conn, _ = listener.accept()
        results.append(handle_connection(conn))

    thread = threading.Thread(target=run, daemon=True)
    thread.start()
    answers = iter(["hi", "there"])
    monkeypatch.setattr("builtins.input", lambda prompt="": next(answers))
    try:
        assert client_main(["--host", "127.0.0.1", "--port", str(port)]) == 0
        thread.join(timeout=5)
    finally:
        listener.close()
    assert results == [2]
    out = capsys.readouterr().out
    prefix = "Receive from server: "
    echoed = "".join(
        line[len(prefix):] for line in out.splitlines() if line.startswith(prefix)
    )
    assert echoed == "hithere"
    assert "]: hi" in out


def test_client_main_connection_refused():
    probe = socket.create_server(("127.0.0.1", 0))
    port = probe.getsockname()[1]
    probe.close()
    assert client_main(["--host", "127.0.0.1", "--port", str(port)]) == 1