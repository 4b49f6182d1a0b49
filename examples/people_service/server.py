"""
People service - serves people.json over stdin/stdout, one JSON request per line

Run:
    python examples/people_service/server.py
    {"jsonrpc": "2.0", "method": "People.save", "params": [{"id": "1", "name": "Ada", "status": "OPEN"}], "id": 1}
"""

import logging
import sys
import threading
from pathlib import Path

from idlrpc_core import RuntimeConfig, Server

IDL_PATH = Path(__file__).parent / "people.json"


class PeopleService:
    """In-memory implementation of the People interface"""

    def __init__(self):
        self._people = {}
        self._lock = threading.Lock()

    def save(self, person):
        with self._lock:
            self._people[person["id"]] = person
        return person["id"]

    def get(self, id):
        with self._lock:
            return self._people.get(id)

    def list(self, status):
        with self._lock:
            people = list(self._people.values())
        if status is None:
            return people
        return [p for p in people if p["status"] == status]


def main():
    logging.basicConfig(level=logging.INFO, stream=sys.stderr)
    server = Server.from_config(RuntimeConfig(idl_path=str(IDL_PATH)))
    server.add_handler("People", PeopleService())

    for line in sys.stdin:
        if line.strip():
            sys.stdout.write(server.call_json(line).decode("utf-8") + "\n")
            sys.stdout.flush()


if __name__ == "__main__":
    main()
