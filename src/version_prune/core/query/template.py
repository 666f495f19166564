# version_prune/core/query/template.py
"""
Jinja2-based query template engine.

Structural parts of a query (table and column names, join keys) are
rendered by Jinja. Identifiers must pass through the ``ident`` filter,
which quotes them with the target dialect's identifier preparer.
Values never enter the template: they stay ``:param_name`` bind
parameters and are handed to the driver untouched.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any

from jinja2 import (
    BaseLoader,
    Environment,
    StrictUndefined,
    Template,
    TemplateSyntaxError,
    UndefinedError,
)
from sqlalchemy.engine import Dialect

logger = logging.getLogger(__name__)

# Bind-parameter pattern (passed through to the driver, not Jinja)
BIND_PARAM_PATTERN = re.compile(r"(?<![:\w]):(\w+)")


@dataclass(frozen=True)
class RenderedQuery:
    sql: str
    params: dict[str, Any] = field(default_factory=dict)


class QueryRenderer:
    """Renders query templates for one SQL dialect."""

    def __init__(self, dialect: Dialect) -> None:
        self._preparer = dialect.identifier_preparer
        self._env = Environment(
            loader=BaseLoader(),
            autoescape=False,
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self._env.filters["ident"] = self.quote
        self._templates: dict[str, Template] = {}

    def quote(self, name: Any) -> str:
        """Always-quoted identifier, with embedded quote characters escaped."""
        if not isinstance(name, str) or not name:
            raise ValueError(f"Invalid SQL identifier: {name!r}")
        return self._preparer.quote_identifier(name)

    def render(
        self,
        template_str: str,
        *,
        params: dict[str, Any] | None = None,
        **context: Any,
    ) -> RenderedQuery:
        """Render ``template_str`` with identifiers from ``context``.

        Args:
            template_str: Jinja2/SQL template.
            params: Bind-parameter values referenced as ``:name``.
            **context: Structural values (table names, column names, ...).

        Raises:
            ValueError: On template errors or missing bind parameters.
        """
        params = dict(params or {})
        try:
            template = self._templates.get(template_str)
            if template is None:
                template = self._env.from_string(template_str)
                self._templates[template_str] = template
            sql = template.render(context).strip()
        except (TemplateSyntaxError, UndefinedError) as exc:
            logger.error("Query template rendering failed: %s", exc)
            raise ValueError(f"Query template error: {exc}") from exc

        missing = [
            name for name in BIND_PARAM_PATTERN.findall(sql) if name not in params
        ]
        if missing:
            raise ValueError(
                f"Bind parameter(s) {', '.join(':' + m for m in missing)} not provided"
            )

        return RenderedQuery(sql=sql, params=params)
