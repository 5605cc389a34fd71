# looproute/api/v1/shared.py
from looproute.core.config import settings
from looproute.services.geocoding import GeocodingClient
from looproute.services.map_control import MapControl
from looproute.services.orchestrator import PlanningOrchestrator
from looproute.services.view import InMemoryRouteView

# Single shared instances
geocoder = GeocodingClient(settings)
view = InMemoryRouteView()
orchestrator = PlanningOrchestrator(settings, geocoder=geocoder, view=view)
control = MapControl(orchestrator, geocoder=geocoder)
