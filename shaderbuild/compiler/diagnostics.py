import re


SEVERITIES = ("ERROR", "WARNING", "INFO", "MESSAGE")

re_diagnostic = re.compile(r"\b(" + "|".join(SEVERITIES) + r"): (\d+):")


def remap_diagnostics(text, dependent_files):
    """Replace the file indices in compiler output with the file paths.

    glslangValidator reports locations as ``ERROR: <index>:<line>: ...``, where
    the index is the source-string-number set with ``#line``. Each
    ``<SEVERITY>: <index>:`` token is matched as a whole (in one pass), so
    index 1 does not match inside index 10. Unknown indices are left as-is.
    """
    dependent_files = list(dependent_files)

    def replace(match):
        severity, index = match.group(1), int(match.group(2))
        if index < len(dependent_files):
            return f"{severity}: {dependent_files[index]}:"
        return match.group(0)

    return re_diagnostic.sub(replace, text)
