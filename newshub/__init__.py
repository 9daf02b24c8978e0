"""News aggregation across NewsAPI, The Guardian and The New York Times."""

__version__ = "0.1.0"
