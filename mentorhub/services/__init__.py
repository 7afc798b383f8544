# Service layer: business rules shared by the HTTP and WebSocket routers.
