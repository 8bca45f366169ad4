"""Pin hostd prices to a fiat target using a smoothed Siacoin exchange rate."""

__version__ = "0.1.0"
