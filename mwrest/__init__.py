"""
Client library for the `MediaWiki REST API`_.

The :py:mod:`mwrest.client` package maps typed calls onto the ``rest.php``
entry point of a wiki, the :py:mod:`mwrest.config` and :py:mod:`mwrest.logging`
modules provide the command line glue used by the scripts in the repository.

.. _`MediaWiki REST API`: https://www.mediawiki.org/wiki/API:REST_API
"""

__version__ = "0.1.0"
__url__ = "https://www.mediawiki.org/wiki/API:REST_API"
