"""Customer domain.

- ``models``: ``NormalizedCustomer`` and the canonical field list
- ``policy``: ``PolicyResolver`` and the per-field ``get_*`` helpers
- ``service``: ``CustomerValidator`` / ``validate``

Submodules are imported directly; the note hook runner depends on ``models``.
"""
