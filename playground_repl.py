import asyncio
import sys

from playground.playground_config import load_config
from playground.playground_datatypes import Ok
from playground.playground_runtime import Playground

HELP = """\
Commands:
  :run            evaluate the program
  :examples       list the examples
  :load <n|name>  replace the program with an example
  :show           show the playground page
  :program        print the program
  :clear          clear the program
  exit            quit
Any other line is appended to the program."""

# A basic awaitable input prompt.
async def ainput(prompt: str) -> str:
    loop = asyncio.get_running_loop()
    sys.stdout.write(prompt)
    sys.stdout.flush()
    return await loop.run_in_executor(None, sys.stdin.readline)


def _config_path(argv):
    """Return the value of --config, if given."""
    for i, arg in enumerate(argv):
        if arg == "--config" and i + 1 < len(argv):
            return argv[i + 1]
        if arg.startswith("--config="):
            return arg.split("=", 1)[1]
    return None


class ConsolePrinter:
    """Prints console diagnostics and notices raised since the last flush."""

    def __init__(self, playground: Playground):
        self.playground = playground
        self._seen = 0

    def flush(self):
        console = self.playground.console
        for effect in console[self._seen:]:
            if effect.get('topics') == ['stderr']:
                print(effect.get('message', ''), file=sys.stderr)
        self._seen = len(console)
        for notice in self.playground.take_notices():
            print(f"! {notice.message}")


async def handle_command(playground: Playground, line: str):
    session = playground.session
    if line == ":run":
        outcome = await playground.run()
        if isinstance(outcome, Ok):
            print(outcome.value)
            if outcome.output:
                print(outcome.output)
    elif line == ":examples":
        if not session.examples:
            print("(no examples)")
        for i, ref in enumerate(session.examples, start=1):
            print(f"{i}. {ref.name}")
    elif line.startswith(":load"):
        choice = line[len(":load"):].strip()
        if await playground.select_example(int(choice) if choice.isdigit() else choice):
            print(playground.session.program)
    elif line == ":show":
        print(playground.render())
    elif line == ":program":
        print(playground.session.program)
    elif line == ":clear":
        playground.edit("")
    elif line == ":help":
        print(HELP)
    else:
        program = session.program
        playground.edit(f"{program}\n{line}" if program else line)


async def main(argv=None):
    """Start a playground session and drive it from the terminal."""
    argv = sys.argv[1:] if argv is None else argv
    try:
        config = load_config(_config_path(argv))
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(1)

    print("rufus playground")
    print("Type ':help' for commands, 'exit' or Ctrl+D to quit.")

    playground = Playground(config)
    console = ConsolePrinter(playground)
    await playground.start()
    console.flush()

    while True:
        try:
            raw = await ainput(">> ")
            if raw == "":
                raise EOFError
            line = raw.rstrip("\n")

            if not line.strip():
                continue
            if line.strip() == "exit":
                break

            await handle_command(playground, line.strip() if line.startswith(":") else line)
            console.flush()

        except EOFError:
            print("\nExiting.")
            break

if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("\nExiting.")
