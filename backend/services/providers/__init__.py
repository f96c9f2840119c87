from .base import PlacesProvider, ProviderError
from .azure_maps import AzureMapsProvider
from .google_places import GooglePlacesProvider

__all__ = ["PlacesProvider", "ProviderError", "AzureMapsProvider", "GooglePlacesProvider"]
