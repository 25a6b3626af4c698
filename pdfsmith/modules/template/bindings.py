"""
Host data marshalling.

Data handed to a template is rebuilt into fresh containers so a render never
shares mutable state with its caller or with another render.
"""

from collections.abc import Callable, Mapping
from typing import Any

from pydantic import BaseModel

from pdfsmith.shared.errors import PdfsmithError, TemplateError

SCALARS = (str, int, float, bool, bytes, type(None))


class HostFunction:
    """Template-callable wrapper around a host Python callable."""

    def __init__(self, func: Callable[..., Any], name: str | None = None) -> None:
        self.func = func
        self.name = name or getattr(func, "__name__", "function")

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        try:
            result = self.func(*args, **kwargs)
        except PdfsmithError:
            raise
        except Exception as e:
            raise TemplateError(
                f"host function {self.name!r} failed: {e}",
                details={"function": self.name},
            ) from e
        return marshal(result)

    def __repr__(self) -> str:
        return f"<host function {self.name}>"


def marshal(value: Any, name: str | None = None) -> Any:
    """Translate a host value into its template-side form."""
    if isinstance(value, SCALARS):
        return value
    if isinstance(value, HostFunction):
        return value
    if isinstance(value, BaseModel):
        return marshal(value.model_dump())
    if isinstance(value, Mapping):
        return {str(k): marshal(v, str(k)) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [marshal(item) for item in value]
    if callable(value):
        return HostFunction(value, name)
    return value


def marshal_data(data: Mapping[str, Any] | None) -> dict[str, Any]:
    """Marshal a top-level payload into the template's variable scope."""
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise TemplateError(f"template data must be a mapping, got {type(data).__name__}")
    return marshal(data)
