# main.py
import asyncio
import logging

import pyperclip
from rich.markup import escape
from textual.app import App, ComposeResult
from textual.containers import Container, Horizontal, Vertical
from textual.logging import TextualHandler
from textual.reactive import reactive
from textual.widgets import Footer, Header, Input

from config import Config
from models import AppState, SearchOutcome, SearchSequencer, SearchStatus
from services import ITunesSearchService
from ui import DetailsPane, LogPane, ResultsDisplay, SearchControls

logger = logging.getLogger(__name__)


class FindITunesApp(App):
    TITLE = "find-itunes"
    BINDINGS = [
        ("d", "toggle_dark", "Toggle dark mode"),
        ("q", "quit", "Quit"),
        ("c", "copy_link", "Copy Preview Link"),
        ("o", "open_preview", "Open Preview"),
    ]
    CSS = """
    #main-container {
        height: 1fr;
    }
    #app-grid {
        height: 3fr;
    }
    #left-pane {
        width: 3fr;
    }
    #right-pane {
        width: 2fr;
        border-left: solid $primary;
        padding: 0 1;
    }
    SearchControls {
        height: auto;
        layout: horizontal;
        padding: 0 1;
    }
    SearchControls Label {
        padding: 1 1 0 0;
    }
    #search-input {
        width: 1fr;
    }
    #results-table {
        height: 1fr;
    }
    #log {
        height: 1fr;
        border-top: solid $primary;
    }
    """

    search_term = reactive("")
    app_state = reactive(AppState(), always_update=True)

    def __init__(self, search_service: ITunesSearchService, config: Config):
        super().__init__()
        self.search_service = search_service
        self.config = config
        self.sequencer = SearchSequencer()

    def compose(self) -> ComposeResult:
        yield Header()
        with Container(id="main-container"):
            with Horizontal(id="app-grid"):
                with Vertical(id="left-pane"):
                    yield SearchControls()
                    yield ResultsDisplay(id="results-table")
                with Vertical(id="right-pane"):
                    yield DetailsPane(id="details-pane")
            yield LogPane(id="log", wrap=True, highlight=True, markup=True)
        yield Footer()

    def on_mount(self) -> None:
        self.query_one(Input).focus()
        self.query_one(LogPane).add_message(
            f"[green]✅ Ready. Searching {self.config.SEARCH_ENDPOINT}[/green]")

    def watch_search_term(self, term: str) -> None:
        self.sub_title = f"'{term}'" if term else ""

    def watch_app_state(self, old_state: AppState, new_state: AppState) -> None:
        """Pushes state changes to child widgets."""
        if old_state.results != new_state.results:
            self.query_one(ResultsDisplay).update_results(new_state.results)
        self.query_one(DetailsPane).update_details(new_state.selected_result)

    def action_toggle_dark(self) -> None:
        self.theme = "textual-light" if self.theme == "textual-dark" else "textual-dark"

    def action_copy_link(self) -> None:
        log = self.query_one(LogPane)
        selected = self.app_state.selected_result
        if not selected:
            log.add_message("[yellow]⚠️ No item selected.[/yellow]")
            return
        if not selected.preview_url:
            log.add_message(f"[yellow]⚠️ '{escape(selected.title)}' has no preview link.[/yellow]")
            return
        try:
            pyperclip.copy(selected.preview_url)
        except pyperclip.PyperclipException as e:
            log.add_message(f"[red]❌ Clipboard unavailable: {escape(str(e))}[/red]")
            return
        log.add_message(f"📋 Copied preview link for '[b]{escape(selected.title)}[/b]'.")

    def action_open_preview(self) -> None:
        log = self.query_one(LogPane)
        selected = self.app_state.selected_result
        if not selected or not selected.preview_url:
            log.add_message("[yellow]⚠️ No preview link to open.[/yellow]")
            return
        self.open_url(selected.preview_url)
        log.add_message(f"▶️ Opening preview for '[b]{escape(selected.title)}[/b]'.")

    # --- Message Handlers ---
    def on_search_controls_search_requested(self, message: SearchControls.SearchRequested) -> None:
        self.query_one(LogPane).add_message(f"🔎 Searching for '{escape(message.query)}'...")
        ticket = self.sequencer.begin()
        self.workers.cancel_group(self, "search_worker")
        self.run_worker(self.perform_search(message.query, ticket),
                        group="search_worker", exclusive=True)

    def on_results_display_row_selected(self, message: ResultsDisplay.RowSelected) -> None:
        selected = self.app_state.find(message.key)
        if selected:
            self.app_state = AppState(results=self.app_state.results, selected_result=selected,
                                      last_status=self.app_state.last_status)
            self.action_open_preview()

    def on_results_display_row_highlighted(self, message: ResultsDisplay.RowHighlighted) -> None:
        """Updates the selected_result in the central state."""
        self.app_state = AppState(results=self.app_state.results,
                                  selected_result=self.app_state.find(message.key),
                                  last_status=self.app_state.last_status)

    # --- Worker Methods ---
    async def perform_search(self, query: str, ticket: int) -> None:
        outcome = await asyncio.to_thread(self.search_service.search, query)
        self.apply_outcome(outcome, ticket)

    def apply_outcome(self, outcome: SearchOutcome, ticket: int) -> bool:
        """Applies a finished search unless a newer one has started since."""
        if not self.sequencer.is_current(ticket):
            logger.debug("Dropping stale results for %r (ticket %d, latest %d)",
                         outcome.query, ticket, self.sequencer.latest)
            return False

        self.app_state = self.app_state.with_outcome(outcome)
        if outcome.status is not SearchStatus.ABORTED:
            self.search_term = outcome.query
        log = self.query_one(LogPane)
        query = escape(outcome.query)
        if outcome.status is SearchStatus.SUCCESS:
            log.add_message(f"🎶 Found {len(self.app_state.results)} results for '{query}'.")
        elif outcome.status is SearchStatus.EMPTY:
            log.add_message(f"🤷 No media found for '{query}'.")
        elif outcome.status is SearchStatus.NETWORK_FAILURE:
            log.add_message(f"[red]❌ Search request failed for '{query}'.[/red]")
            log.add_message(f"[dim]{escape(outcome.detail or '')}[/dim]")
        elif outcome.status is SearchStatus.DECODE_FAILURE:
            log.add_message(f"[red]❌ Could not read the search response for '{query}'.[/red]")
            log.add_message(f"[dim]{escape(outcome.detail or '')}[/dim]")
        else:
            log.add_message(f"[yellow]⚠️ Search not sent: {escape(outcome.detail or '')}[/yellow]")
        return True


def configure_logging() -> None:
    logging.basicConfig(level=logging.INFO, handlers=[TextualHandler()])
    for name in ("services", __name__):
        logging.getLogger(name).setLevel(logging.DEBUG)


def main() -> None:
    configure_logging()
    app_config = Config()
    search_service = ITunesSearchService(app_config)

    app = FindITunesApp(search_service, app_config)
    try:
        app.run()
    finally:
        search_service.close()


if __name__ == "__main__":
    main()
