"""InfinityTech storefront core: cart, checkout, order lifecycle and settlement."""

__version__ = "1.0.0"
