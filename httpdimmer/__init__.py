"""Control HTTP/JSON dimmable lights and keep their accessory registry in sync."""
