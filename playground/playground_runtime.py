import asyncio
from typing import Dict, List, Optional, Union

from playground.playground_catalog import CatalogLoader
from playground.playground_config import PlaygroundConfig
from playground.playground_datatypes import (
    Session, ExampleRef, Notice, EvaluationOutcome, Ready, Failed, NotReady,
)
from playground.playground_gateway import EvaluationGateway
from playground.playground_printer import Printer
from playground.playground_session import (
    Event, Transition, apply,
    ProgramEdited, ModuleLoading, ModuleLoaded, ModuleLoadFailed,
    CatalogLoaded, CatalogFailed, ExampleLoaded, ExampleFailed,
    RunStarted, RunRejected, RunCompleted, RunFailed,
)

RUN_KEY = "Enter"


def _describe(e: BaseException) -> str:
    msg = str(e)
    return msg if msg else type(e).__name__


class Playground:
    """
    Hosts one playground session.

    Owns the current Session, the console (diagnostic effect records) and the
    queue of user-visible notices. Every state change goes through
    `playground_session.apply`, so the session is replaced in one step.
    """

    def __init__(self,
                 config: Optional[PlaygroundConfig] = None,
                 gateway: Optional[EvaluationGateway] = None,
                 catalog: Optional[CatalogLoader] = None):
        self.config = config or PlaygroundConfig()
        self.gateway = gateway or EvaluationGateway(self.config.module)
        self.catalog = catalog or CatalogLoader(self.config)
        self.session = Session(program=self.config.default_program)
        self.console: List[Dict] = []
        self.notices: List[Notice] = []
        # Overlapping run requests are served one at a time.
        self._run_lock = asyncio.Lock()

    # ---------------------------------------------------------------
    # State plumbing
    # ---------------------------------------------------------------

    def dispatch(self, event: Event) -> Transition:
        transition = apply(self.session, event)
        self.session = transition.session
        self.console.extend(transition.effects)
        for notice in transition.notices:
            self.notices.append(notice)
            self.console.append({'topics': ['notice'], 'message': notice.message})
        return transition

    def take_notices(self) -> List[Notice]:
        """Return and clear the pending notices."""
        pending = list(self.notices)
        self.notices.clear()
        return pending

    # ---------------------------------------------------------------
    # Startup
    # ---------------------------------------------------------------

    async def start(self):
        """Load the evaluation module and the example catalog concurrently."""
        await asyncio.gather(self.load_module(), self.load_examples())

    async def load_module(self):
        if self.session.ready:
            return
        self.dispatch(ModuleLoading())
        state = await self.gateway.load()
        match state:
            case Ready(handle=handle):
                self.dispatch(ModuleLoaded(handle))
            case Failed(error=error):
                self.dispatch(ModuleLoadFailed(error))

    async def load_examples(self):
        try:
            examples = await self.catalog.load_catalog()
        except Exception as e:
            self.dispatch(CatalogFailed(_describe(e)))
            return
        self.dispatch(CatalogLoaded(examples))
        if examples:
            await self.load_example(examples[0])

    async def load_example(self, ref: ExampleRef) -> bool:
        try:
            text = await self.catalog.load_example(ref)
        except Exception as e:
            self.dispatch(ExampleFailed(ref, _describe(e)))
            return False
        self.dispatch(ExampleLoaded(ref, text))
        return True

    # ---------------------------------------------------------------
    # User actions
    # ---------------------------------------------------------------

    def edit(self, text: str):
        self.dispatch(ProgramEdited(text))

    def find_example(self, choice: Union[ExampleRef, str, int]) -> Optional[ExampleRef]:
        """Look up an example by ref, file, name or 1-based position."""
        examples = self.session.examples
        match choice:
            case ExampleRef():
                return choice
            case bool():
                return None
            case int():
                return examples[choice - 1] if 1 <= choice <= len(examples) else None
            case str():
                for ref in examples:
                    if choice in (ref.file, ref.name):
                        return ref
                return None
        return None

    async def select_example(self, choice: Union[ExampleRef, str, int]) -> bool:
        ref = self.find_example(choice)
        if ref is None:
            missing = ExampleRef(name=str(choice), file=str(choice))
            self.dispatch(ExampleFailed(missing, f"no example matches {choice!r}"))
            return False
        return await self.load_example(ref)

    async def run(self) -> Optional[EvaluationOutcome]:
        """Evaluate the current program. Returns the outcome, or None when nothing ran."""
        if not self.session.ready:
            self.dispatch(RunRejected())
            return None
        async with self._run_lock:
            self.dispatch(RunStarted())
            try:
                outcome = await self.gateway.invoke(self.session.program)
            except NotReady:
                self.dispatch(RunRejected())
                return None
            except Exception as e:
                self.dispatch(RunFailed(_describe(e)))
                return None
            self.dispatch(RunCompleted(outcome))
            return outcome

    async def handle_key(self, key: str, *, meta: bool = False, ctrl: bool = False) -> Optional[EvaluationOutcome]:
        """Keyboard binding for the editor: modifier+Enter runs the program."""
        if key == RUN_KEY and (meta or ctrl):
            return await self.run()
        return None

    # ---------------------------------------------------------------
    # Rendering
    # ---------------------------------------------------------------

    def render(self) -> str:
        return Printer(editor_rows=self.config.editor_rows).pformat(self.session)
