"""
API HTTP para itinerary-ai-core.

Esta capa sirve la app de una sola sesión (upload → edit → preview) como HTML
renderizado en el servidor, y expone los exports (PDF / JPEG) como descargas.

Todo el estado vive en un único `AppController` en memoria
(ver `api.dependencies.get_controller`).
"""
