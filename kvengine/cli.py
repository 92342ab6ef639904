"""Interactive shell for the key-value engine."""

from __future__ import annotations

import argparse
import os
import sys
import time
from collections.abc import Iterable
from os import PathLike
from typing import TextIO

from kvengine.config import Config, load_config
from kvengine.entry import LIVE, TOMBSTONE, Entry
from kvengine.memtable import Memtable, MemtableFullError
from kvengine.sstable import create_sstable, read_index, verify_sstable
from kvengine.wal import WAL

CONFIG_FILE = "config.json"
WAL_FILE = "wal.log"
SSTABLE_PATH = "sstable_test"

_BANNER = "===== Key-Value engine ====="
_USAGE = "Commands: PUT <key> <value> | GET <key> | DELETE <key> | FLUSH | VERIFY | EXIT"


class Shell:
    """Reads commands, keeps a memtable and logs every write to the WAL."""

    def __init__(
        self,
        config: Config,
        wal: WAL,
        out: TextIO | None = None,
        sstable_path: str | PathLike[str] = SSTABLE_PATH,
    ) -> None:
        self.config = config
        self.wal = wal
        self.out = out if out is not None else sys.stdout
        self.sstable_path = os.fspath(sstable_path)
        self.memtable = Memtable(config.memtable_max_size)

    def _say(self, text: str) -> None:
        print(text, file=self.out)

    def execute(self, line: str) -> bool:
        """Run one command line; return False when the shell should stop."""
        args = line.split()
        if not args:
            return True

        command = args[0].upper()
        handler = {
            "PUT": self._put,
            "GET": self._get,
            "DELETE": self._delete,
            "FLUSH": self._flush_command,
            "VERIFY": self._verify,
        }.get(command)
        if command == "EXIT":
            return False
        if handler is None:
            self._say(">> Unknown command.")
        else:
            handler(args[1:])
        return True

    def run(self, lines: Iterable[str]) -> None:
        """Print the banner and execute lines until EXIT or the input ends."""
        self._say(_BANNER)
        self._say(_USAGE)
        for line in lines:
            self.out.write("> ")
            if not self.execute(line):
                break

    def _put(self, args: list[str]) -> None:
        if len(args) < 2:
            self._say(">> PUT requires a key and a value.")
            return
        key, value = args[0], " ".join(args[1:])
        entry = Entry(int(time.time()), LIVE, key.encode(), value.encode())
        try:
            self.memtable.put(key, value)
        except MemtableFullError:
            self._say(">> Memtable full! Creating SSTable...")
            self._write_sstable()
            self._print_index()
            self.memtable = Memtable(self.config.memtable_max_size)
            try:
                self.memtable.put(key, value)
            except MemtableFullError:
                pass
            self.wal.write(entry)
            self._say(">> PUT after flush")
            return
        self.wal.write(entry)
        self._say(">> PUT successful")
        self._print_memtable()

    def _get(self, args: list[str]) -> None:
        if len(args) != 1:
            self._say(">> GET requires exactly one key.")
            return
        value = self.memtable.get(args[0])
        if value is None:
            self._say(">> No value for the given key.")
        else:
            self._say(f"Lookup.. {value}")

    def _delete(self, args: list[str]) -> None:
        if len(args) != 1:
            self._say(">> DELETE requires exactly one key.")
            return
        key = args[0]
        entry = Entry(int(time.time()), TOMBSTONE, key.encode(), b"")
        self.memtable.delete(key)
        self.wal.write(entry)
        self._say(">> Deleted")
        self._print_memtable()

        if len(self.memtable) >= self.config.memtable_max_size:
            self._say(">> Memtable full! Creating SSTable...")
            self._write_sstable()
            self._print_index()
            self.memtable = Memtable(self.config.memtable_max_size)

    def _flush_command(self, args: list[str]) -> None:
        try:
            create_sstable(
                self.sstable_path,
                self.memtable.get_all().values(),
                self.config.summary_step,
            )
        except (OSError, ValueError) as exc:
            self._say(f">> Error while flushing: {exc}")
            return
        self._say(f">> SSTable created ({self.sstable_path}.*)")
        self._print_index()

    def _verify(self, args: list[str]) -> None:
        try:
            valid = verify_sstable(self.sstable_path)
        except (OSError, ValueError) as exc:
            self._say(f">> Verification failed: {exc}")
            return
        if valid:
            self._say("Merkle validation succeeded!")
        else:
            self._say("Merkle validation FAILED! The data has been altered.")

    def _write_sstable(self) -> None:
        try:
            create_sstable(
                self.sstable_path,
                self.memtable.get_all().values(),
                self.config.summary_step,
            )
        except (OSError, ValueError) as exc:
            self._say(f">> Error: {exc}")

    def _print_memtable(self) -> None:
        self._say("===== Memtable contents: ======")
        for key, entry in self.memtable.get_all().items():
            value = entry.value.decode("utf-8", errors="replace")
            self._say(f"  {key} = {value} (Tombstone: {entry.tombstone})")

    def _print_index(self) -> None:
        self._say("====== SSTable index contents: ======")
        try:
            records = read_index(self.sstable_path)
        except OSError as exc:
            self._say(f"Error opening index file: {exc}")
            return
        for key, offset in records:
            self._say(f"  {key.decode('utf-8', errors='replace')} @ offset {offset}")


def main(argv: list[str] | None = None) -> int:
    """Start the interactive shell on standard input."""
    parser = argparse.ArgumentParser(description="Interactive key-value engine.")
    parser.parse_args(argv)

    config = load_config(CONFIG_FILE)
    with WAL(WAL_FILE) as wal:
        Shell(config, wal, sys.stdout, SSTABLE_PATH).run(sys.stdin)
    return 0


if __name__ == "__main__":
    sys.exit(main())