import logging
import mimetypes
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from font_detector.config import Settings, get_settings
from font_detector.core.acquisition import INVALID_FILE_TYPE_MESSAGE
from font_detector.core.inference import create_inference_client
from font_detector.core.pipeline import FontAnalyzer
from font_detector.core.session import AnalysisSession
from font_detector.core.types import AnalysisState, SessionSnapshot
from font_detector.logging_setup import setup_logging
from font_detector.schemas import DetectedFont

app = typer.Typer(no_args_is_help=True, help='Identify fonts in YouTube thumbnails or any image.')

BAR_WIDTH = 20
BAND_STYLES = {'high': 'green', 'medium': 'yellow', 'low': 'red'}


def confidence_bar(font: DetectedFont, width: int = BAR_WIDTH) -> Text:
    percent = font.confidence_percent
    filled = max(0, min(width, round(width * percent / 100)))
    bar = Text()
    bar.append('█' * filled, style=BAND_STYLES[font.confidence_band])
    bar.append('░' * (width - filled), style='dim')
    bar.append(f' {percent}%')
    return bar


def font_card(font: DetectedFont) -> Panel:
    grid = Table.grid(padding=(0, 2))
    grid.add_column(style='bold')
    grid.add_column()
    grid.add_row('Text', Text(font.display_text, style='bold'))
    grid.add_row('Style', Text(f'{font.description} ({font.style_class})', style='italic'))
    grid.add_row('Confidence', confidence_bar(font))
    grid.add_row('Suggested family', Text(f'{font.font_family_suggestion} → {font.google_fonts_url}', style='cyan'))
    grid.add_row('AI reasoning', Text(font.reasoning, style='dim'))
    return Panel(grid, title=Text(font.font_name, style='bold blue'), title_align='left')


def render_snapshot(console: Console, snapshot: SessionSnapshot) -> None:
    if snapshot.state is AnalysisState.FAILED:
        console.print(Text(snapshot.error or 'An unknown error occurred during analysis.', style='bold red'))
        return
    if snapshot.image_url and not snapshot.image_url.startswith('data:'):
        console.print(Text(f'Analyzed image: {snapshot.image_url}', style='dim'))
    if not snapshot.fonts:
        console.print('No fonts detected.')
        console.print(Text("The AI couldn't find any distinct text in the image. Try another one!", style='dim'))
        return
    console.print(Text('Detected Fonts', style='bold'))
    for font in snapshot.fonts:
        console.print(font_card(font))


def _load_settings() -> Settings:
    try:
        return get_settings()
    except ValidationError as exc:
        Console(stderr=True).print(Text(f'Invalid configuration (is API_KEY set?): {exc}', style='bold red'))
        raise typer.Exit(code=2) from exc


def _build_session(settings: Settings) -> AnalysisSession:
    setup_logging(settings.log_level)
    try:
        inference_client = create_inference_client(settings)
    except ValueError as exc:
        Console(stderr=True).print(Text(f'Invalid configuration: {exc}', style='bold red'))
        raise typer.Exit(code=2) from exc
    analyzer = FontAnalyzer.from_settings(settings, inference_client)
    return AnalysisSession(analyzer)


def _finish(snapshot: SessionSnapshot) -> None:
    render_snapshot(Console(), snapshot)
    if snapshot.state is AnalysisState.FAILED:
        raise typer.Exit(code=1)


@app.command('url')
def analyze_url(url: str = typer.Argument(..., help='YouTube watch, embed or youtu.be link')):
    """Detect fonts in a YouTube video's thumbnail."""
    session = _build_session(_load_settings())
    _finish(session.submit_url(url))


@app.command('file')
def analyze_file(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help='Image file (png, jpeg, webp)'),
):
    """Detect fonts in a local image file."""
    session = _build_session(_load_settings())
    media_type, _ = mimetypes.guess_type(path.name)
    if not (media_type or '').startswith('image/'):
        snapshot = session.fail(INVALID_FILE_TYPE_MESSAGE)
    else:
        snapshot = session.submit_file(path.read_bytes(), media_type, filename=path.name)
    _finish(snapshot)


@app.command('serve')
def serve(
    host: str | None = typer.Option(None, help='Bind address (default: HOST setting)'),
    port: int | None = typer.Option(None, help='Port (default: PORT setting)'),
):
    """Run the HTTP API with uvicorn."""
    import uvicorn

    settings = _load_settings()
    setup_logging(settings.log_level)
    logging.getLogger('font_detector').info('Starting API host=%s port=%s', host or settings.host, port or settings.port)
    uvicorn.run('font_detector.main:app', host=host or settings.host, port=port or settings.port)


if __name__ == '__main__':
    app()
