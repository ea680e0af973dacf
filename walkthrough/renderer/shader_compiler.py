import logging
import logging
import pathlib as pl
import pathlib as pl
import re
import re
import typing
import typing

logger: logging.Logger = logging.getLogger(__name__)

def resolve_includes(source: str, base_path: pl.Path, including: frozenset[pl.Path] = frozenset()) -> str:
    """
    Recursively resolves #include "filename" directives in GLSL source code.
#   Recursively resolves #include "filename" directives in GLSL source code.
    Standard GLSL does not support #include, so this pre-processor manually inserts the code.
#   Standard GLSL does not support #include, so this pre-processor manually inserts the code.
    A file that includes itself, directly or through other files, is replaced by an error comment.
#   A file that includes itself, directly or through other files, is replaced by an error comment.
    """
    # Match: #include "filename" (handling optional whitespace)
#   # Match: #include "filename" (handling optional whitespace)
    pattern: re.Pattern[str] = re.compile(pattern=r'^\s*#include\s+"([^"]+)"', flags=re.MULTILINE)
#   pattern: re.Pattern[str] = re.compile(pattern=r'^\s*#include\s+"([^"]+)"', flags=re.MULTILINE)

    def replace(match: re.Match[str]) -> str:
#   def replace(match: re.Match[str]) -> str:
        filename: str | typing.Any = match.group(1)
#       filename: str | typing.Any = match.group(1)
        included_path: pl.Path = (base_path / filename).resolve(strict=False)
#       included_path: pl.Path = (base_path / filename).resolve(strict=False)

        if not included_path.exists():
#       if not included_path.exists():
            logger.warning("Included file not found: %s", included_path)
#           logger.warning("Included file not found: %s", included_path)
            return f"// ERROR: Include not found {filename}"
#           return f"// ERROR: Include not found {filename}"
        if included_path in including:
#       if included_path in including:
            logger.warning("Circular include skipped: %s", included_path)
#           logger.warning("Circular include skipped: %s", included_path)
            return f"// ERROR: Circular include {filename}"
#           return f"// ERROR: Circular include {filename}"

        included_content: str = included_path.read_text(encoding="utf-8")
#       included_content: str = included_path.read_text(encoding="utf-8")
        # Nested includes resolve relative to the same shader directory.
#       # Nested includes resolve relative to the same shader directory.
        return resolve_includes(source=included_content, base_path=base_path, including=including | {included_path})
#       return resolve_includes(source=included_content, base_path=base_path, including=including | {included_path})

    return pattern.sub(replace, source)
#   return pattern.sub(replace, source)

def load_shader_source(path: pl.Path) -> str:
    return resolve_includes(path.read_text(encoding="utf-8"), path.parent, frozenset({path.resolve(strict=False)}))
#   return resolve_includes(path.read_text(encoding="utf-8"), path.parent, frozenset({path.resolve(strict=False)}))
