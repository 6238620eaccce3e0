"""Symphony flat-file serialization.

Import from the submodules (``tags``, ``serializer``, ``writer``) directly; the
customer model depends on ``tags``, so this package stays import-free.
"""
