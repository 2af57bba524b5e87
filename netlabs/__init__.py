"""Socket programs: a framed TCP message board, name resolvers, an echo service, file upload and a local board."""

__version__ = "0.1.0"