"""
Core document model for fluentforge.

- ``ir``: document, field and widget types
- ``catalog`` / ``resolver``: widget registry and field-type compatibility
- ``mutations``: validated, pure document edits
- ``history`` / ``session``: undo/redo and the editing session
- ``validator``, ``document_io``, ``manifest_import``: checks and file formats
"""
