from html import escape
from typing import Iterable

from .catalog import LEVELS
from .controller import RecommendationController


def select_field(field_id: str, options: Iterable[str], value: str, placeholder: str, disabled: bool = False) -> str:
    """
    Labeled dropdown bound to ``value``. Knows nothing about genres or moods:
    the caller supplies the options and the page script relays changes.
    """
    opts = [f'<option value="">{escape(placeholder)}</option>']
    for opt in options:
        selected = " selected" if opt == value else ""
        opts.append(f'<option value="{escape(opt, quote=True)}"{selected}>{escape(opt)}</option>')
    return (
        f'<label for="{field_id}">{field_id.capitalize()}</label>'
        f'<select id="{field_id}" name="{field_id}" data-field="{field_id}"'
        f'{" disabled" if disabled else ""} onchange="choose(this)">'
        + "".join(opts)
        + "</select>"
    )


def _results(controller: RecommendationController) -> str:
    results = controller.state.results
    blocks = []
    for index, item in enumerate(results):
        blocks.append(
            "<details>"
            f"<summary>Recommendation {len(results) - index} — "
            f"{escape(item.genre)} / {escape(item.mood)} / {escape(item.level)}</summary>"
            f'<pre class="result">{escape(item.text)}</pre>'
            "</details>"
        )
    return "".join(blocks)


def render_page(controller: RecommendationController) -> str:
    state = controller.state
    genre_field = select_field("genre", controller.catalog.genres, state.genre, "Please select a genre")
    mood_field = select_field(
        "mood",
        controller.available_moods,
        state.mood,
        "Please select a mood" if state.genre else "Select a genre first",
        disabled=not state.genre,
    )
    level_field = select_field("level", LEVELS, state.level, "Please select a level")
    button_label = "Getting recommendations..." if state.loading else "Get Recommendation"
    error = f'<p class="error">{escape(state.error)}</p>' if state.error else ""

    return f"""
<!doctype html><meta charset="utf-8">
<title>Book Recommender</title>
<style>body{{font-family:system-ui;margin:2rem;max-width:780px}} select,button{{padding:.5rem;margin:.25rem;display:block}}
.error{{color:#c00}} pre{{white-space:pre-wrap}} details{{border:1px solid #ccc;padding:.75rem;margin:.5rem 0}}</style>
<h1>Book Recommender</h1>
<div>
  {genre_field}
  {mood_field}
  {level_field}
  <button id="submit" onclick="go(this)"{"" if controller.can_submit else " disabled"}>{button_label}</button>
  {error}
</div>
<div id="results">{_results(controller)}</div>
<script>
async function post(url, body){{
  return fetch(url, {{method:'POST', headers:{{'Content-Type':'application/json'}}, body: JSON.stringify(body)}});
}}
async function choose(el){{
  await post('/session/select', {{field: el.dataset.field, value: el.value}});
  location.reload();
}}
async function go(btn){{
  btn.disabled = true;
  btn.textContent = 'Getting recommendations...';
  await post('/session/submit', {{}});
  location.reload();
}}
</script>
"""
