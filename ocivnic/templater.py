# This file is part of oci-vnic. See LICENSE file for license information.
"""Render profile templates.

The first line of a template may name its renderer::

    ## template: jinja

Templates without that header are rendered with basic_render.
"""

import logging
import re

from jinja2 import StrictUndefined, Template, TemplateSyntaxError

from ocivnic import util

LOG = logging.getLogger(__name__)
TYPE_MATCHER = re.compile(r"##\s*template:(.*)", re.I)
BASIC_MATCHER = re.compile(r"\$\{([A-Za-z0-9_.]+)\}|\$([A-Za-z0-9_.]+)")


class JinjaSyntaxParsingException(TemplateSyntaxError):
    """A jinja syntax error reported against the line of the template file.

    lineno counts the header line, which jinja itself never sees.
    """

    def __init__(self, error: TemplateSyntaxError) -> None:
        super().__init__(
            error.message or "unknown syntax error",
            error.lineno,
            error.name,
            error.filename,
        )
        self.source = error.source

    def __str__(self):
        # source excludes the header, so line n of the file is n - 2 here
        lines = (self.source or "").splitlines()
        index = self.lineno - 2
        content = lines[index].strip() if 0 <= index < len(lines) else ""
        return self.format_error_message(self.message, self.lineno, content)

    @staticmethod
    def format_error_message(syntax_error, line_number, line_content=""):
        message = (
            "Unable to parse Jinja template due to syntax error: %s on line %s"
            % (syntax_error, line_number)
        )
        if line_content:
            message += ": " + line_content
        return message


class UndefinedJinjaVariable(StrictUndefined):
    """Raise on any use of a variable the template params do not define."""


def _lookup(params, name):
    """Return params[a][b] for the name 'a.b'."""
    *parents, key = name.split(".")
    value = params
    for parent in parents:
        if not isinstance(value, dict):
            raise TypeError(
                "Can not traverse into non-dictionary '%s' of type %s while"
                " looking for subkey '%s'"
                % (value, util.obj_name(value), parent)
            )
        value = value[parent]
    if not isinstance(value, dict):
        raise TypeError(
            "Can not extract key '%s' from non-dictionary '%s' of type %s"
            % (key, value, util.obj_name(value))
        )
    return value[key]


def basic_render(content, params):
    """Substitute $name, ${name} and dotted $a.b references from params."""
    return BASIC_MATCHER.sub(
        lambda match: str(_lookup(params, match.group(1) or match.group(2))),
        content,
    )


def jinja_render(content, params):
    # jinja drops one trailing newline of the source
    tail = "\n" if content.endswith("\n") else ""
    try:
        template = Template(
            content,
            undefined=UndefinedJinjaVariable,
            trim_blocks=True,
            extensions=["jinja2.ext.do"],
        )
    except TemplateSyntaxError as error:
        error.source = content
        error.lineno += 1
        raise JinjaSyntaxParsingException(error) from error
    return template.render(**params) + tail


RENDERERS = {
    "basic": basic_render,
    "jinja": jinja_render,
}


def detect_template(text):
    """Return (type, renderer, content) for text.

    content is text without its '## template:' header line, if any.
    """
    header, _, rest = text.partition("\n")
    type_match = TYPE_MATCHER.match(header)
    if not type_match:
        return ("basic", basic_render, text)
    template_type = type_match.group(1).strip().lower()
    if template_type not in RENDERERS:
        raise ValueError(
            "Unknown template rendering type '%s' requested" % template_type
        )
    return (template_type, RENDERERS[template_type], rest)


def render_from_file(fn, params):
    template_type, renderer, content = detect_template(
        util.load_text_file(fn)
    )
    LOG.debug("Rendering content of '%s' using renderer %s", fn, template_type)
    return renderer(content, params or {})
