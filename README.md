# netlabs

A collection of small client/server programs built on plain sockets:

- **Message board** (`netlabs.board_server`, `netlabs.board_client`): a threaded TCP
  server with sign-up, login, logout, article posting and a list of online users.
- **Resolver** (`netlabs.resolver`): turns a domain name into its IPv4 addresses, or an
  IPv4 address into its host name and aliases.
- **UDP resolver** (`netlabs.udp_resolver`): the same lookup offered as a UDP service,
  with every request logged to a file.
- **Echo** (`netlabs.echo`): a TCP server that splits what it receives on line
  breaks and sends each line back.
- **File upload** (`netlabs.file_transfer`): a client uploads files one by one and the
  server stores them in a directory.
- **Local board** (`netlabs.local_board`): an offline, single-user login/post/logout
  menu that records each action in a log file.

## Installing

```
pip install .
```

No third-party libraries are needed at run time. For the tests:

```
pip install ".[test]"
pytest
```

## Message board

```
netlabs-board-server 5500
netlabs-board-server 5500 --accounts path/to/account.txt
netlabs-board-client 127.0.0.1 5500
```

The server reads accounts from `./TCP_Server/database/account.txt` unless
`--accounts` names another file. Each client connection is served in its own
thread.

The client shows a menu: `0` sign up, `1` log in, `2` view online users,
`3` log out, `4` exit, `5` post article.

### Protocol

Every message is framed by `netlabs.framing`: the UTF-8 text preceded by its
byte length as a four-character, right-aligned decimal number (`"   3BYE"`).
The server accepts bodies of 1 to 100 bytes; anything else ends the connection.

Requests are `KEYWORD parameter`:

| Request       | Meaning                        |
|---------------|--------------------------------|
| `USER name`   | log in                         |
| `SIGNUP name` | create an active account       |
| `POST text`   | post an article (login needed) |
| `ONLINE ...`  | list logged-in users           |
| `BYE`         | log out                        |

On connecting, the server sends `100`. Replies are status codes from
`netlabs.codes.Code`, except `ONLINE`, whose reply is a leading space followed by
each logged-in username and a space.

| Code | Meaning                                   |
|------|-------------------------------------------|
| 100  | connected                                 |
| 110  | logged in                                 |
| 120  | article posted                            |
| 130  | logged out                                |
| 211  | account is banned                         |
| 212  | account does not exist                    |
| 213  | account is logged in from another client  |
| 214  | this client is already logged in          |
| 215  | account database error                    |
| 221  | not logged in                             |
| 300  | unknown request                           |
| 410  | account already exists                    |
| 411  | signed up                                 |

`netlabs.codes.status_message` turns a code, or a reply string starting with
one, into the text the client prints.

### Account database

One account per line: a username, whitespace, and a status, `1` for active and
`0` for banned:

```
admin 1
tungbt 1
ductq 0
```

`netlabs.accounts.AccountStore` reads this file (`verify`, `exists`) and
appends to it (`add`); signing up appends a `<username> 1` line.

### Using the pieces directly

```python
from netlabs.accounts import AccountStore
from netlabs.board_server import BoardService
from netlabs.sessions import SessionRegistry

service = BoardService(AccountStore("account.txt"), SessionRegistry())
service.handle(1, "USER admin")   # "110" if admin is an active account
service.handle(1, "ONLINE")       # " admin "
```

`netlabs.board_client.BoardClient.connect(host, port)` opens a connection and
offers `login`, `sign_up`, `logout`, `post_article` and `online_users`.

## Name resolution

```
netlabs-resolve example.com
netlabs-resolve 127.0.0.1
```

Prints `Result: ` and one result per line, or `Not found information`.
`netlabs.resolver.resolve` returns the same results as a list and raises
`ResolutionError` when the lookup fails.

## UDP resolver service

```
netlabs-udp-resolver-server 5600
netlabs-udp-resolver-client 127.0.0.1 5600
```

The server answers `+name` for an address, `+` followed by space-separated
addresses for a domain, or a not-found reply. Each request is appended to
`UDP_Server/logs/server.log`; that directory must exist, otherwise the server
prints `Can not open file log` and carries on. The client prompts for queries
until an empty line.

## Echo service

```
netlabs-echo-server [--port 12345]
netlabs-echo-client [--host 127.0.0.1] [--port 12345]
```

The server handles one client at a time. The client sends two lines typed at
the prompt, then prints everything the server sends back.

## File upload

```
netlabs-upload-server 5700 uploads [--base TCP_Server/data] [--log TCP_Server/logs/server.log]
netlabs-upload-client 127.0.0.1 5700
```

Uploaded files go to `<base>/<directory>`, which is created if missing. The
client sends `UPLD <name> <size>` padded with NUL bytes to 1024 bytes; the
server replies `+OK Please send file` or a `-ERR` reply (files larger than
4294967296 bytes are refused), then confirms with `+OK Successful upload`.
The client asks for file paths one at a time; an empty line ends the session.
The log directory must exist for exchanges to be logged.

## Local board

```
netlabs-local-board [--accounts ./database/account.txt] [--log logs/board.log]
```

A menu to log in, post a message, log out and exit, using the same account
file format. Each action is appended to the log as
`[dd/mm/YYYY HH:MM:SS] $ <menu number> $ <user or message> $ +OK|-ERROR`.

## What it does not do

- Accounts have usernames only: there are no passwords, and no way to ban,
  unban or delete an account other than editing the account file.
- The board server keeps sessions and posted articles in memory only; articles
  are not stored and cannot be read back by clients, and everything is lost when
  the server stops.
- The file server stores uploads but offers no way to list or download them.
- Traffic is plain, unencrypted TCP or UDP.