# rootservice

A small skeleton for a long-running HTTP service. It gives you:

- `rootservice.config.Config`: parses a JSON configuration document and
  pulls out the database, token and mesh settings and the error-code table.
- `rootservice.manager.Manager`: a thread-safe, keyed store of shared
  objects, with `add`, `set`, `update`, `delete`, `execute`,
  `execute_with` and their `*_new` variants that build the object with a
  factory.
- `rootservice.service_base.ServiceBase`: a service lifecycle (`start`,
  `stop`, `pause`, `resume`, `shutdown`, `handle_control`) that tracks its
  status in a `ServiceStatus` and logs its events through `logging`.
- `rootservice.web`: a WSGI application built with `create_app()`, with a
  `/root/v1/resource` endpoint answering GET, POST, PUT and DELETE with a
  fixed greeting. The controller is wrapped in `AuthFilter`, which turns any
  failure into an empty 401 response, and in `SecurityMiddleware`, which
  answers 404 to requests whose `Origin` contains
  `www.some-evil-place.com` and adds `Access-Control-Allow-Origin: *` and
  `Access-Control-Allow-Credentials: true` to every other response.
- `rootservice.root_service.RootService` and `TemplateService`: a service
  that reads `Config/config.json` and serves the web application with
  Werkzeug's development server until it is stopped.
- `rootservice.tools`: `exe_dir()` and `read_file()` helpers.

## Installing

```
pip install .
```

## Running

Run the service in the foreground:

```
rootservice
```

Pass `-debug` (or `/debug`) to run the server directly in debug mode:

```
rootservice -debug
```

Stop it with Ctrl+C (or SIGTERM). The command reads its configuration from
`Config/config.json` in the directory of the program that was run. The
server listens on the first entry of the `listeners` array (`address`
defaults to `0.0.0.0`, `port` to `80`); if the file is missing or defines no
listener, the error is logged and nothing is served.

## Configuration

The configuration is a JSON object with a `listeners` list, a `service`
section and a `components` list. For example:

```json
{
  "listeners": [{"address": "127.0.0.1", "port": 8080}],
  "service": {"name": "TemplateService", "port": 8080},
  "components": [
    {
      "name": "PostgreSQL",
      "type": "Database",
      "parameters": {
        "database_name": "app",
        "host": "localhost",
        "port": 5432,
        "user": "user",
        "password": "password"
      }
    },
    {"name": "Token", "type": "Service", "parameters": {"host": "localhost", "port": 9000}},
    {
      "name": "Errors",
      "type": "Error code",
      "parameters": {"error": [{"code": 200, "name": "OK"}]}
    }
  ]
}
```

```python
from rootservice.config import Config

config = Config(text)                     # raises ConfigError on bad JSON
db = config.load_db_config()              # DBConfig(name="app", host="localhost", ...)
token_host = config.load_token_config()   # "http://localhost:9000"
mesh = config.load_mesh_config()          # None here: no "Mesh" component

codes = {}
config.load_error_config(codes)           # codes == {200: "OK"}
```

`set_config()` replaces the document and keeps the previous one if the new
text does not parse. Without an argument, `load_error_config()` fills the
module-level `ERROR_CODES` table.

## Keeping shared objects

```python
from rootservice.manager import Manager

users = Manager(dict)
users.add_new("user1", name="John")
users.execute("user1", lambda user: user.update(age=31))
users.execute_with("user1", lambda user: user["age"])   # 31
users.keys()                                            # ["user1"]
```

`keys()` and `values()` are returned in key order.

## Serving the application elsewhere

`create_app()` returns a plain WSGI callable, so any WSGI server can host it:

```python
from werkzeug.serving import run_simple
from rootservice.web import create_app

run_simple("127.0.0.1", 8080, create_app())
```

## What this package does not do

- `-install` and `-remove` only print that service registration is not
  available and exit with status 1; the package does not register itself
  with any system service manager.
- `web.Model` does not talk to a database: `connect()` and `init_schema()`
  only record what they are given.
- Pausing only logs an entry; the server keeps answering requests.

## Tests

```
pip install .[test]
pytest
```