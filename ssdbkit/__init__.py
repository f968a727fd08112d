"""Parts for key-value servers: record buffers, config files, logging, IP filters, sorted sets and worker pools."""

__version__ = "2.0.0"