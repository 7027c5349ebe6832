import argparse
import logging
from pathlib import Path
from typing import Optional

from game.game import Game
from game.position import Direction, PositionWatcher
from game.storage import JsonFileStore, KeyValueStore, MemoryStore
from game.view import CacheView
from game import settings
from world.grid import GridAddress, InvalidCoordinateError

HELP = """Commands:
  n / s / e / w        step one cell north, south, east or west
  look                 list visible caches
  collect I J          take the top coin from the cache at (I, J)
  deposit I J          put your top coin into the cache at (I, J)
  sensor on|off        start or stop the position sensor
  geo LAT LNG          feed a sensor fix (only while the sensor is on)
  inventory            list your coins
  reset                erase all progress
  quit                 leave (saving unless --no-save)"""


class ConsoleView(CacheView):
    """Prints status updates for the text front end."""

    def notify(self, message: str) -> None:
        print(message)


def run_console(game: Game) -> None:
    watcher = PositionWatcher(game)
    print(HELP)
    while True:
        try:
            line = input(f"[{game.address}] > ").strip()
        except EOFError:
            break
        if not line:
            continue
        command, *args = line.split()
        command = command.lower()
        try:
            if command in ("quit", "q", "exit"):
                break
            elif command in ("help", "?"):
                print(HELP)
            elif command in ("n", "s", "e", "w", "north", "south", "east", "west"):
                game.move(Direction.parse(command))
            elif command == "look":
                for cache in sorted(game.caches, key=lambda c: c.address):
                    print(f"  {cache.address}: {cache.value} coins")
            elif command in ("collect", "deposit"):
                address = GridAddress(int(args[0]), int(args[1]))
                result = game.collect(address) if command == "collect" else game.deposit(address)
                if not result.ok:
                    print("Nothing to transfer.")
            elif command == "sensor":
                if args and args[0].lower() == "on":
                    watcher.start()
                else:
                    watcher.stop()
                print(f"Sensor {'on' if watcher.active else 'off'}")
            elif command == "geo":
                if not watcher.feed(float(args[0]), float(args[1])):
                    print("Sensor is off; use 'sensor on' first.")
            elif command == "inventory":
                print(", ".join(game.inventory.identities()) or "(empty)")
            elif command == "reset":
                if input("Erase all progress? [y/N] ").strip().lower() == "y":
                    game.reset()
            else:
                print(f"Unknown command '{command}'. Type 'help'.")
        except (IndexError, ValueError, InvalidCoordinateError) as e:
            print(f"Invalid input: {e}")
        except KeyError as e:
            print(e.args[0] if e.args else e)


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Collect and deposit coins in caches scattered over a world grid."
    )
    parser.add_argument(
        "--no-save",
        action="store_true",
        help="Keep all state in memory; nothing is written to disk",
    )
    parser.add_argument(
        "--save-file",
        type=Path,
        default=settings.SAVE_FILE,
        help="JSON file holding the saved session (default: %(default)s)",
    )
    parser.add_argument(
        "--console",
        action="store_true",
        help="Play in the terminal instead of the map window",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity",
    )
    args = parser.parse_args()
    logging.basicConfig(level=getattr(logging, args.log_level))

    store: KeyValueStore = MemoryStore() if args.no_save else JsonFileStore(args.save_file)
    game: Optional[Game] = None

    try:
        if args.console:
            game = Game(store=store, view=ConsoleView())
            game.begin()
            run_console(game)
        else:
            from ui.map_view import MapView

            view = MapView()
            game = Game(store=store, view=view)
            view.attach(game)
            game.begin()
            view.run()
    except KeyboardInterrupt:
        print("\nStopping game...")
    finally:
        if game is not None:
            if args.no_save:
                print("Skipping save (--no-save)")
            else:
                game.save()
            game.close()


if __name__ == "__main__":
    main()
