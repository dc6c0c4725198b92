"""
no-window-prefix

Disallows Web APIs reached through `window` (`window.fetch()`,
`window["setTimeout"]`, ...). Web Workers have no `window`, so code that
has to run in both contexts should use `self`, `globalThis` or the bare
name instead.
"""

from typing import Optional

from workerlint.lint.context import Context
from workerlint.lint.handler import Handler
from workerlint.lint.rule import LintRule
from workerlint.parser.parser import ParsedProgram
from workerlint.parser.view import (
    ComputedProp,
    IdentProp,
    MemberExpr,
    PrivateNameProp,
    string_value,
    template_raw,
)

CODE = "no-window-prefix"
MESSAGE = "For compatibility between the Window context and the Web Workers, calling Web APIs via `window` is disallowed"
HINT = "Instead, call this API via `self`, `globalThis`, or no extra prefix"

DOCS = """\
Disallows the use of Web APIs via the `window` object.

In most situations, the global variable `window` works like `globalThis`.
For example, you could call the `fetch` API like `window.fetch(..)` instead
of `fetch(..)` or `globalThis.fetch(..)`. In Web Workers, however, `window`
is not available, but instead `self`, `globalThis`, or no prefix work fine.
Therefore, for compatibility between Web Workers and other contexts, it's
highly recommended to not access global properties via `window`.

Some APIs, including `window.alert`, `window.location` and `window.history`,
are allowed to call with `window` because they are not supported or have
different meaning in Workers.

Invalid:

    const a = await window.fetch("https://example.com");
    const b = window.Deno.metrics();
    console.log(window["performance"].now());

Valid:

    const a1 = await fetch("https://example.com");
    const a2 = await self.fetch("https://example.com");
    const a3 = await globalThis.fetch("https://example.com");

    // `alert` is allowed to call with `window` because it's not supported in Workers
    window.alert("hello");

    // `onload` is also allowed to call with `window`
    window.onload = () => {};
"""


# ============================================================================
# DENY LIST
# ============================================================================

PROPERTY_DENY_LIST = frozenset({
    # Constructors and interfaces exposed in Worker global scope
    "AbortController",
    "AbortSignal",
    "Blob",
    "BroadcastChannel",
    "ByteLengthQueuingStrategy",
    "Cache",
    "CacheStorage",
    "CanvasGradient",
    "CanvasPattern",
    "CloseEvent",
    "CountQueuingStrategy",
    "Crypto",
    "CryptoKey",
    "CustomEvent",
    "DOMException",
    "DOMMatrix",
    "DOMMatrixReadOnly",
    "DOMPoint",
    "DOMPointReadOnly",
    "DOMQuad",
    "DOMRect",
    "DOMRectReadOnly",
    "DOMStringList",
    "ErrorEvent",
    "Event",
    "EventSource",
    "EventTarget",
    "File",
    "FileList",
    "FileReader",
    "FontFace",
    "FontFaceSet",
    "FontFaceSetLoadEvent",
    "FormData",
    "Headers",
    "IDBCursor",
    "IDBCursorWithValue",
    "IDBDatabase",
    "IDBFactory",
    "IDBIndex",
    "IDBKeyRange",
    "IDBObjectStore",
    "IDBOpenDBRequest",
    "IDBRequest",
    "IDBTransaction",
    "IDBVersionChangeEvent",
    "ImageBitmap",
    "ImageBitmapRenderingContext",
    "ImageData",
    "MediaCapabilities",
    "MessageChannel",
    "MessageEvent",
    "MessagePort",
    "NetworkInformation",
    "Notification",
    "Path2D",
    "Performance",
    "PerformanceEntry",
    "PerformanceMark",
    "PerformanceMeasure",
    "PerformanceObserver",
    "PerformanceObserverEntryList",
    "PerformanceResourceTiming",
    "PerformanceServerTiming",
    "PermissionStatus",
    "Permissions",
    "ProgressEvent",
    "PromiseRejectionEvent",
    "PushManager",
    "PushSubscription",
    "PushSubscriptionOptions",
    "ReadableStream",
    "ReadableStreamDefaultController",
    "ReadableStreamDefaultReader",
    "Request",
    "Response",
    "SecurityPolicyViolationEvent",
    "ServiceWorker",
    "ServiceWorkerContainer",
    "ServiceWorkerRegistration",
    "StorageManager",
    "SubtleCrypto",
    "TextDecoder",
    "TextDecoderStream",
    "TextEncoder",
    "TextEncoderStream",
    "TextMetrics",
    "TransformStream",
    "TransformStreamDefaultController",
    "URL",
    "URLSearchParams",
    "WebGL2RenderingContext",
    "WebGLActiveInfo",
    "WebGLBuffer",
    "WebGLContextEvent",
    "WebGLFramebuffer",
    "WebGLProgram",
    "WebGLQuery",
    "WebGLRenderbuffer",
    "WebGLRenderingContext",
    "WebGLSampler",
    "WebGLShader",
    "WebGLShaderPrecisionFormat",
    "WebGLSync",
    "WebGLTexture",
    "WebGLTransformFeedback",
    "WebGLUniformLocation",
    "WebGLVertexArrayObject",
    "WebSocket",
    "Worker",
    "WritableStream",
    "WritableStreamDefaultController",
    "WritableStreamDefaultWriter",
    "XMLHttpRequest",
    "XMLHttpRequestEventTarget",
    "XMLHttpRequestUpload",
    "console",
    "WebAssembly",

    # Properties and functions of WorkerGlobalScope / DedicatedWorkerGlobalScope
    "name",
    "navigator",
    "self",
    "close",
    "postMessage",
    "dispatchEvent",
    "cancelAnimationFrame",
    "requestAnimationFrame",
    "onerror",
    "onlanguagechange",
    "onmessage",
    "onmessageerror",
    "onoffline",
    "ononline",
    "onrejectionhandled",
    "onunhandledrejection",
    "caches",
    "crossOriginIsolated",
    "crypto",
    "indexedDB",
    "isSecureContext",
    "origin",
    "performance",
    "atob",
    "btoa",
    "clearInterval",
    "clearTimeout",
    "createImageBitmap",
    "fetch",
    "queueMicrotask",
    "setInterval",
    "setTimeout",
    "addEventListener",
    "removeEventListener",

    # Runtime namespace
    "Deno",
})


def is_denied(name: str) -> bool:
    """True if `window.<name>` should be reported."""
    return name in PROPERTY_DENY_LIST


# ============================================================================
# SYMBOL EXTRACTION
# ============================================================================

def extract_symbol(expr: MemberExpr) -> Optional[str]:
    """
    Statically known property name of a member access, or None when it
    can only be known by running the code.
    """
    prop = expr.prop
    if isinstance(prop, (IdentProp, PrivateNameProp)):
        return prop.sym
    if isinstance(prop, ComputedProp):
        key = prop.expr
        if key.type == "string":
            return string_value(key, expr.program)
        # `foo[bar]`
        if key.type == "identifier":
            return None
        if key.type == "template_string":
            return template_raw(key, expr.program)
    return None


# ============================================================================
# RULE
# ============================================================================

class NoWindowPrefixHandler(Handler):

    def visit_member_expr(self, expr: MemberExpr, ctx: Context) -> None:
        # Don't check chained member expressions (e.g. `foo.bar.baz`)
        if expr.is_member_object():
            return

        obj = expr.obj
        if obj.type != "identifier" or expr.text_of(obj) != "window":
            return
        if not ctx.scope().is_global(obj):
            return

        symbol = extract_symbol(expr)
        if symbol is None or not is_denied(symbol):
            return

        ctx.add_diagnostic_with_hint(expr.range, CODE, MESSAGE, HINT)


class NoWindowPrefix(LintRule):
    """Report Web APIs accessed through the `window` global."""

    code = CODE
    tags = ("recommended",)
    docs = DOCS

    def lint_program(self, context: Context, program: ParsedProgram) -> None:
        NoWindowPrefixHandler().traverse(program, context)
