"""fzf-import: find an import used elsewhere in a JS/TS project and add it to a file."""

__version__ = "1.0.0"
