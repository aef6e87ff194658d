"""Receipt rendering from the Jinja2 templates shipped with the package."""

from collections.abc import Callable
from pathlib import Path
from typing import Any

import jinja2

TEMPLATE_DIR = Path(__file__).parent / "templates"

_ENV = jinja2.Environment(
    loader=jinja2.FileSystemLoader(TEMPLATE_DIR),
    autoescape=False,
    keep_trailing_newline=True,
    trim_blocks=True,
    lstrip_blocks=True,
    undefined=jinja2.StrictUndefined,
)


def render(template_name: str, money: Callable[[float], str], **context: Any) -> str:
    """Render a template, formatting amounts with the ``money`` callable.

    It is passed per call so one environment serves every currency
    and rounding setting.
    """
    template = _ENV.get_template(template_name)
    return template.render(**context, money=money)
