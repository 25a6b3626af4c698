"""
Sandboxed template engine.

Each render builds its own Jinja2 SandboxedEnvironment. Template loading goes
through the shimmed fs/path modules, relative includes resolve against the
including template's directory, and include nesting is capped.
"""

import re
import tempfile
import time
from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from jinja2 import (
    BaseLoader,
    Environment,
    StrictUndefined,
    Template,
    TemplateNotFound,
    TemplateSyntaxError,
    UndefinedError,
    nodes,
    pass_context,
)
from jinja2 import TemplateError as JinjaTemplateError
from jinja2.ext import Extension
from jinja2.runtime import Context
from jinja2.sandbox import SandboxedEnvironment, SecurityError
from markupsafe import Markup

from pdfsmith.config import Settings, get_settings
from pdfsmith.shared.errors import (
    ConfigurationError,
    PdfsmithError,
    SandboxInitError,
    TemplateError,
)
from pdfsmith.shared.logging import get_logger

from .bindings import marshal, marshal_data
from .schemas import RenderRequest
from .shims import ModuleRegistry

logger = get_logger(__name__)


# EJS-style tags: <%= expr %> escaped output, <%- expr %> raw output,
# <% stmt %> statements, <%# ... %> comments
EJS_DELIMITERS = {
    "block_start_string": "<%",
    "block_end_string": "%>",
    "variable_start_string": "<%=",
    "variable_end_string": "%>",
    "comment_start_string": "<%#",
    "comment_end_string": "%>",
}

RAW_OUTPUT_TAG = re.compile(r"<%-(?P<body>.*?)(?P<trim>-?)%>", re.DOTALL)
LEADING_NAME = re.compile(r"\s*(?P<name>[A-Za-z_]\w*)(?P<rest>.*)", re.DOTALL)

# Tag names that keep `<%- ... %>` a whitespace-trimming statement
STATEMENT_TAGS = frozenset([
    "for", "if", "elif", "else", "block", "extends", "print", "macro", "call",
    "filter", "include", "from", "import", "set", "with", "autoescape", "raw",
    "endfor", "endif", "endblock", "endmacro", "endcall", "endfilter", "endset",
    "endwith", "endautoescape", "endraw",
])

# Jinja2 hooks the sandbox is built on
LIBRARY_HOOKS: tuple[tuple[Any, str], ...] = (
    (Environment, "join_path"),
    (Environment, "make_globals"),
    (BaseLoader, "get_source"),
    (Template, "root_render_func"),
    (Template, "from_code"),
    (Extension, "preprocess"),
    (nodes, "Include"),
)


def check_library_hooks() -> None:
    """
    Fail fast when the installed Jinja2 lacks a hook the sandbox overrides.

    Raises:
        SandboxInitError: one or more hooks are missing
    """
    missing = [
        f"{getattr(owner, '__name__', owner)}.{attr}"
        for owner, attr in LIBRARY_HOOKS
        if not hasattr(owner, attr) and attr not in getattr(owner, "__annotations__", {})
    ]
    if missing:
        raise SandboxInitError(
            f"library patch target not found: {', '.join(missing)}",
            details={"missing": missing},
        )


def _rewrite_raw_output(match: re.Match[str]) -> str:
    body = match.group("body")
    if not body.strip():
        return match.group(0)

    leading = LEADING_NAME.match(body)
    if leading:
        name = leading.group("name")
        is_call = leading.group("rest").lstrip().startswith("(")
        if name in STATEMENT_TAGS and not (name == "include" and is_call):
            return match.group(0)

    trim = "-" if match.group("trim") else ""
    return f"<%= ({body})|safe {trim}%>"


class RawOutputTags(Extension):
    """Compiles EJS `<%- expr %>` tags to unescaped output."""

    def preprocess(self, source: str, name: str | None, filename: str | None = None) -> str:
        return RAW_OUTPUT_TAG.sub(_rewrite_raw_output, source)


class ShimLoader(BaseLoader):
    """Loads templates through the sandbox fs/path shims."""

    def __init__(self, modules: ModuleRegistry) -> None:
        self.modules = modules

    def get_source(
        self, environment: Environment, template: str
    ) -> tuple[str, str, Callable[[], bool]]:
        path = self.modules.path.resolve(template)
        self.modules.fs.confine(path)
        if not self.modules.fs.exists_sync(path):
            raise TemplateNotFound(template)
        source = self.modules.fs.read_file_sync(path)
        return source, path, lambda: True


class IncludeDepthTemplate(Template):
    """Template whose renders count toward the sandbox's include nesting limit."""

    @property
    def root_render_func(self) -> Callable[[Context], Iterator[str]]:
        return self._render_counted

    @root_render_func.setter
    def root_render_func(self, func: Callable[[Context], Iterator[str]]) -> None:
        self._render_root = func

    def _render_counted(self, context: Context) -> Iterator[str]:
        env = self.environment
        env.render_depth += 1
        try:
            # The outermost render is level 0
            depth = env.render_depth - 1
            if depth > env.max_include_depth:
                raise TemplateError(
                    f"include depth exceeded ({env.max_include_depth}) at {self.name}",
                    details={"limit": env.max_include_depth, "template": self.name},
                )
            yield from self._render_root(context)
        finally:
            env.render_depth -= 1


class TemplateSandbox(SandboxedEnvironment):
    """One isolated template interpreter, used for a single render."""

    template_class = IncludeDepthTemplate

    def __init__(
        self,
        modules: ModuleRegistry,
        syntax: str = "ejs",
        max_include_depth: int = 32,
    ) -> None:
        if syntax == "ejs":
            options: dict[str, Any] = {**EJS_DELIMITERS, "extensions": [RawOutputTags]}
        else:
            options = {}
        super().__init__(
            loader=ShimLoader(modules),
            autoescape=True,
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            **options,
        )
        self.modules = modules
        self.max_include_depth = max_include_depth
        self.render_depth = 0
        self.globals["require"] = modules.require
        self.globals["include"] = include

    def join_path(self, template: str, parent: str) -> str:
        """Resolve an include name relative to the including template."""
        path = self.modules.path
        return path.resolve(path.dirname(parent), template)

    def compile_source(self, source: str, filename: str | None = None) -> Template:
        """Compile inline source, naming it after `filename` so includes resolve."""
        code = self.compile(source, name=filename, filename=filename)
        return self.template_class.from_code(self, code, self.make_globals(None))


@pass_context
def include(context: Context, name: str, data: Mapping[str, Any] | None = None) -> Markup:
    """Render another template in place, sharing the current scope."""
    env = context.environment
    target = env.join_path(name, context.name) if context.name else name
    template = env.get_template(target)

    scope = context.get_all()
    if data:
        scope = {**scope, **marshal(dict(data))}
    return Markup(template.render(scope))


class TemplateEngine:
    """Renders templates to markup in a fresh sandbox per call."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        check_library_hooks()

    def _sandbox(self, root_dir: str | Path) -> TemplateSandbox:
        check_library_hooks()
        return TemplateSandbox(
            ModuleRegistry(root_dir),
            syntax=self.settings.template_syntax,
            max_include_depth=self.settings.max_include_depth,
        )

    def render(
        self,
        source: str,
        data: Mapping[str, Any] | None = None,
        root_dir: str | Path | None = None,
        filename: str | Path | None = None,
    ) -> str:
        """
        Render template source to markup.

        Args:
            source: Template text
            data: Variables; callables become template functions
            root_dir: Sandbox root; defaults to the directory of `filename`,
                else an empty directory that lives for this render only
            filename: Path the source came from, used to resolve includes

        Returns:
            Rendered markup

        Raises:
            TemplateError: syntax/evaluation failure, missing include,
                host function error
            SandboxInitError: Jinja2 hooks missing
        """
        if root_dir is None and filename is None:
            # Inline source with no root can reach no files
            with tempfile.TemporaryDirectory(prefix="pdfsmith-inline-") as empty_root:
                return self.render(source, data, root_dir=empty_root)

        if filename is not None:
            filename = str(Path(filename).resolve())
        if root_dir is None:
            root_dir = Path(filename).parent

        start = time.perf_counter()
        sandbox = self._sandbox(root_dir)
        scope = marshal_data(data)

        with translate_errors():
            template = sandbox.compile_source(source, filename)
            html = template.render(scope)

        logger.debug(
            f"Rendered {filename or '<inline>'} in {(time.perf_counter() - start) * 1000:.1f}ms"
        )
        return html

    def render_file(
        self,
        path: str | Path,
        data: Mapping[str, Any] | None = None,
    ) -> str:
        """Render a template file; its directory becomes the sandbox root."""
        template_path = Path(path).resolve()
        if not template_path.is_file():
            raise ConfigurationError(
                f"template file not found: {path}",
                details={"path": str(path)},
            )

        sandbox = self._sandbox(template_path.parent)
        scope = marshal_data(data)

        with translate_errors():
            template = sandbox.get_template(str(template_path))
            return template.render(scope)

    def render_request(self, request: RenderRequest) -> str:
        """
        Render a RenderRequest.

        Raises:
            ConfigurationError: both or neither of template_text/template_path set
        """
        has_text = request.template_text is not None
        has_path = bool(request.template_path)
        if has_text == has_path:
            raise ConfigurationError(
                "exactly one of template_text or template_path is required"
            )

        if has_path:
            return self.render_file(request.template_path, request.data)
        return self.render(request.template_text, request.data, root_dir=request.root_dir)


@contextmanager
def translate_errors() -> Iterator[None]:
    """Map Jinja2 and runtime failures onto TemplateError."""
    try:
        yield
    except PdfsmithError:
        raise
    except TemplateNotFound as e:
        raise TemplateError(f"include not found: {e.name}", details={"include": e.name}) from e
    except TemplateSyntaxError as e:
        raise TemplateError(
            f"template syntax error: {e.message} (line {e.lineno})",
            details={"line": e.lineno, "filename": e.filename},
        ) from e
    except SecurityError as e:
        raise TemplateError(f"sandbox violation: {e}") from e
    except UndefinedError as e:
        raise TemplateError(f"undefined value: {e.message}") from e
    except JinjaTemplateError as e:
        raise TemplateError(f"template error: {e}") from e
    except Exception as e:
        raise TemplateError(f"template evaluation failed: {e}") from e
