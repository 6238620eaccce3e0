"""
Learning Pass - patron registration normalization for Symphony ILS.

Validates third-party "new library patron" registrations against library and
partner policy and renders them as Symphony flat-file records.
"""

__version__ = "0.1.0"
