"""Seismic activity near Campi Flegrei and Santorini, fetched from the USGS catalog."""

__version__ = "0.1.0"
