import re
import socket
import threading

import pytest

from netlabs.file_transfer import (
    FILE_SIZE_LIMIT,
    INVALID_REQUEST,
    READY,
    RECV_FAILED,
    REQUEST_SIZE,
    UPLOADED,
    FileReceiver,
    ServerReply,
    format_upload_request,
    log_event,
    parse_reply,
    parse_upload_request,
    send_file,
)


def _pair():
    server_sock, client_sock = socket.socketpair()
    server_sock.settimeout(5)
    client_sock.settimeout(5)
    return server_sock, client_sock


def _start_receiver(receiver, sock):
    result = {}

    def run():
        result["count"] = receiver.receive(sock, "127.0.0.1", 5000)

    thread = threading.Thread(target=run, daemon=True)
    thread.start()
    return thread, result


def _raw_request(text):
    return text.encode("utf-8").ljust(REQUEST_SIZE, b"\0")


@pytest.fixture
def store(tmp_path):
    directory = tmp_path / "store"
    directory.mkdir()
    return directory


def test_parse_reply_ok():
    reply = parse_reply("+OK Welcome to file server")
    assert reply == ServerReply("+OK", "Welcome to file server")
    assert reply.ok


def test_parse_reply_error_and_padding():
    reply = parse_reply(b"-ERR Error opening file for writing\0\0\0")
    assert reply.status == "-ERR"
    assert reply.message == "Error opening file for writing"
    assert not reply.ok


@pytest.mark.parametrize("text", ["+OK", "", "   "])
def test_parse_reply_invalid_format(text):
    with pytest.raises(ValueError):
        parse_reply(text)


def test_parse_reply_invalid_status():
    with pytest.raises(ValueError):
        parse_reply("HELLO there")


def test_upload_request_round_trip():
    text = format_upload_request("report.pdf", 42)
    assert text == "UPLD report.pdf 42"
    assert parse_upload_request(text) == ("report.pdf", 42)


def test_parse_upload_request_bytes_with_padding():
    assert parse_upload_request(_raw_request("UPLD a.txt 7")) == ("a.txt", 7)


@pytest.mark.parametrize("text", ["UPLD", "UPLD a.txt", "PUT a.txt 3", "UPLD a.txt x"])
def test_parse_upload_request_invalid(text):
    with pytest.raises(ValueError):
        parse_upload_request(text)


@pytest.mark.parametrize("name", ["", "two words.txt"])
def test_format_upload_request_rejects_bad_names(name):
    with pytest.raises(ValueError):
        format_upload_request(name, 1)


def test_log_event_line(tmp_path):
    log = tmp_path / "server.log"
    line = log_event(log, "127.0.0.1", 5000, "UPLD a 1", UPLOADED)
    assert re.fullmatch(
        r"\[\d{2}/\d{2}/\d{4} \d{2}:\d{2}:\d{2}\] \$127\.0\.0\.1:5000 "
        r"\$UPLD a 1 \$\+OK Successful upload\n",
        line,
    )
    assert log.read_text(encoding="utf-8") == line


def test_log_event_unwritable(tmp_path):
    assert log_event(tmp_path, "127.0.0.1", 1, "r", "s") is None


def test_upload_round_trip(tmp_path, store):
    log = tmp_path / "server.log"
    source = tmp_path / "payload.bin"
    data = bytes(range(256)) * 10
    source.write_bytes(data)
    server_sock, client_sock = _pair()
    thread, result = _start_receiver(FileReceiver(store, log), server_sock)
    with client_sock:
        replies = send_file(client_sock, source)
    thread.join(5)
    server_sock.close()
    assert [str(r) for r in replies] == [READY, UPLOADED]
    assert (store / "payload.bin").read_bytes() == data
    assert result["count"] == 1
    assert f"$UPLD payload.bin {len(data)} ${UPLOADED}" in log.read_text(
        encoding="utf-8"
    )


def test_several_uploads_on_one_connection(tmp_path, store):
    first = tmp_path / "one.txt"
    second = tmp_path / "empty.txt"
    first.write_bytes(b"hello world")
    second.write_bytes(b"")
    server_sock, client_sock = _pair()
    thread, result = _start_receiver(
        FileReceiver(store, tmp_path / "server.log"), server_sock
    )
    with client_sock:
        first_replies = send_file(client_sock, first)
        second_replies = send_file(client_sock, second)
    thread.join(5)
    server_sock.close()
    assert all(r.ok for r in first_replies + second_replies)
    assert (store / "one.txt").read_bytes() == b"hello world"
    assert (store / "empty.txt").read_bytes() == b""
    assert result["count"] == 2


def test_too_large_file_is_refused(tmp_path, store):
    server_sock, client_sock = _pair()
    thread, result = _start_receiver(
        FileReceiver(store, tmp_path / "server.log"), server_sock
    )
    with client_sock:
        client_sock.sendall(_raw_request(f"UPLD big.bin {FILE_SIZE_LIMIT + 1}"))
        reply = parse_reply(client_sock.recv(REQUEST_SIZE))
    thread.join(5)
    server_sock.close()
    assert reply.status == "-ERR"
    assert reply.message.endswith("smaller than 4294967296 byte")
    assert not (store / "big.bin").exists()
    assert result["count"] == 0


def test_invalid_request_gets_error(tmp_path, store):
    server_sock, client_sock = _pair()
    thread, result = _start_receiver(
        FileReceiver(store, tmp_path / "server.log"), server_sock
    )
    with client_sock:
        client_sock.sendall(_raw_request("HELLO"))
        reply = client_sock.recv(REQUEST_SIZE).decode("utf-8")
    thread.join(5)
    server_sock.close()
    assert reply == INVALID_REQUEST
    assert result["count"] == 0


def test_name_cannot_escape_directory(tmp_path, store):
    server_sock, client_sock = _pair()
    thread, result = _start_receiver(
        FileReceiver(store, tmp_path / "server.log"), server_sock
    )
    with client_sock:
        client_sock.sendall(_raw_request("UPLD ../escape.txt 3"))
        assert parse_reply(client_sock.recv(REQUEST_SIZE)).ok
        client_sock.sendall(b"abc")
        final = parse_reply(client_sock.recv(REQUEST_SIZE))
    thread.join(5)
    server_sock.close()
    assert str(final) == UPLOADED
    assert (store / "escape.txt").read_bytes() == b"abc"
    assert not (tmp_path / "escape.txt").exists()
    assert result["count"] == 1


def test_disconnect_during_upload_is_logged(tmp_path, store):
    log = tmp_path / "server.log"
    server_sock, client_sock = _pair()
    thread, result = _start_receiver(FileReceiver(store, log), server_sock)
    with client_sock:
        client_sock.sendall(_raw_request("UPLD part.bin 10"))
        assert parse_reply(client_sock.recv(REQUEST_SIZE)).ok
        client_sock.sendall(b"abc")
    thread.join(5)
    server_sock.close()
    assert result["count"] == 0
    assert RECV_FAILED in log.read_text(encoding="utf-8")


def test_send_file_stops_on_refusal(tmp_path):
    source = tmp_path / "data.txt"
    source.write_bytes(b"content")
    server_sock, client_sock = _pair()
    seen = {}

    def fake_server():
        seen["request"] = server_sock.recv(REQUEST_SIZE * 2)
        server_sock.sendall(b"-ERR no room")
        server_sock.shutdown(socket.SHUT_WR)
        seen["rest"] = server_sock.recv(REQUEST_SIZE)

    thread = threading.Thread(target=fake_server, daemon=True)
    thread.start()
    with client_sock:
        replies = send_file(client_sock, source)
    thread.join(5)
    server_sock.close()
    assert replies == [ServerReply("-ERR", "no room")]
    assert parse_upload_request(seen["request"]) == ("data.txt", len(b"content"))
    assert seen["rest"] == b""


def test_send_file_missing_file(tmp_path):
    server_sock, client_sock = _pair()
    with server_sock, client_sock:
        with pytest.raises(FileNotFoundError):
            send_file(client_sock, tmp_path / "missing.txt")