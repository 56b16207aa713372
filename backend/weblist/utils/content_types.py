"""Content-type classification by extension and by content sniffing."""

from __future__ import annotations

import mimetypes
import posixpath
from dataclasses import dataclass

SNIFF_LEN = 512

KNOWN_TEXT_FILENAMES = frozenset({
    "Makefile", "makefile", "GNUmakefile",
    "Dockerfile", "Containerfile",
    "Vagrantfile", "Gemfile", "Rakefile", "Procfile",
    "LICENSE", "LICENCE", "COPYING",
    "README", "CHANGELOG", "CHANGES", "HISTORY",
    "AUTHORS", "CONTRIBUTORS", "INSTALL", "TODO",
    "NEWS", "NOTICE", "PATENTS", "VERSION",
    "Brewfile", "Podfile", "Fastfile", "Appfile",
    "Berksfile", "Capfile", "Guardfile", "Thorfile",
    "Dangerfile", "Deliverfile", "Matchfile", "Snapfile",
    "Caddyfile", "Justfile", "justfile",
    "OWNERS", "CODEOWNERS",
})

COMMON_TEXT_EXTENSIONS = frozenset("." + ext for ext in (
    "txt", "text", "log", "csv", "json", "xml", "css", "scss", "less",
    "js", "jsx", "ts", "tsx", "go", "py", "java", "c", "cpp", "h", "hpp", "rb",
    "php", "swift", "pl", "sh", "bash", "zsh", "yaml", "yml", "toml", "ini", "conf",
    "config", "env", "lock", "md", "markdown", "rst", "adoc", "asciidoc", "bat", "cmd",
    "ps1", "psm1", "r", "m", "mat", "sas", "sql", "vb", "vbs", "cs", "fs", "fsx",
    "dart", "kotlin", "scala", "groovy", "lua", "rust", "rs", "vue", "elm", "ex", "exs",
    "hs", "clj", "d", "jl", "nim", "svg", "graphql", "gql", "proto", "avro", "diff", "patch",
    "properties", "cfg", "htaccess", "gitignore", "dockerignore", "rtf", "sdoc",
))

# mimetypes reports compressed suffixes as an encoding rather than a type
_ENCODING_TYPES = {
    "gzip": "application/gzip",
    "bzip2": "application/x-bzip2",
    "xz": "application/x-xz",
    "compress": "application/x-compress",
    "br": "application/x-brotli",
}

# signatures of formats that must never be shown as text
_BINARY_SIGNATURES = (
    b"%PDF-",
    b"%!PS-Adobe-",
    b"GIF87a",
    b"GIF89a",
    b"\x89PNG\r\n\x1a\n",
    b"\xff\xd8\xff",
    b"BM",
    b"OggS",
    b"ID3",
    b"PK\x03\x04",
    b"\x1f\x8b\x08",
    b"Rar!\x1a\x07",
    b"\x00asm",
    b"wOFF",
    b"wOF2",
)

# control bytes that never occur in text; tab, LF, FF, CR and ESC are allowed
_BINARY_BYTES = frozenset(
    list(range(0x00, 0x09)) + [0x0B] + list(range(0x0E, 0x1B)) + list(range(0x1C, 0x20))
)


@dataclass(frozen=True)
class ContentTypeInfo:
    mime_type: str
    is_text: bool
    is_html: bool
    is_pdf: bool
    is_image: bool


def extension(name: str) -> str:
    """Suffix from the last dot, so ``.gitignore`` is its own extension."""
    base = posixpath.basename(name)
    idx = base.rfind(".")
    return base[idx:] if idx >= 0 else ""


def mime_by_extension(ext: str) -> str | None:
    if not ext:
        return None
    mime, encoding = mimetypes.guess_type("file" + ext, strict=False)
    if mime is None and encoding:
        return _ENCODING_TYPES.get(encoding, "application/octet-stream")
    return mime


def is_text_like_mime(mime_type: str | None) -> bool:
    if not mime_type:
        return False
    return (
        mime_type.startswith("text/")
        or mime_type.startswith("application/json")
        or mime_type.startswith("application/xml")
        or mime_type.startswith("application/javascript")
        or "html" in mime_type
    )


def determine_content_type(path: str) -> ContentTypeInfo:
    """Classify a file for presentation (view inline vs. download)."""
    ext_lower = extension(path).lower()

    if ext_lower in (".jsx", ".tsx"):
        mime_type = "application/javascript"
    elif ext_lower in COMMON_TEXT_EXTENSIONS:
        mime_type = "text/plain"
    else:
        mime_type = mime_by_extension(extension(path)) or "text/plain"

    return ContentTypeInfo(
        mime_type=mime_type,
        is_text=is_text_like_mime(mime_type) or ext_lower in COMMON_TEXT_EXTENSIONS,
        is_html="html" in mime_type,
        is_pdf=mime_type == "application/pdf",
        is_image=mime_type.startswith("image/"),
    )


def should_sniff(name: str) -> bool:
    """Only extensionless files and text-looking extensions are worth reading."""
    ext = extension(name)
    if not ext:
        return True
    if ext.lower() in COMMON_TEXT_EXTENSIONS:
        return True
    return is_text_like_mime(mime_by_extension(ext))


def looks_binary(data: bytes) -> bool:
    """Content heuristic over a file prefix; empty input is not binary."""
    if not data:
        return False
    if data.startswith((b"\xfe\xff", b"\xff\xfe", b"\xef\xbb\xbf")):
        return False
    if data.startswith(_BINARY_SIGNATURES):
        return True
    return any(b in _BINARY_BYTES for b in data[:SNIFF_LEN])


def is_viewable(name: str, is_dir: bool, is_binary: bool) -> bool:
    """Whether the browser can present the file instead of downloading it."""
    if is_dir or is_binary:
        return False

    ext = extension(name)
    if not ext:
        # extensionless and not binary: known names and plain text alike
        return True

    if ext.lower() in COMMON_TEXT_EXTENSIONS:
        return True

    mime_type = mime_by_extension(ext)
    if not mime_type:
        return False
    return (
        is_text_like_mime(mime_type)
        or mime_type.startswith("image/")
        or mime_type == "application/pdf"
    )
