from fastapi import FastAPI
from pathlib import Path
import json
import os

app = FastAPI(title="Mock Routing Server", version="1.0.0")
# Support both local development and Docker
DATA_DIR = Path("/routing_stub") if os.path.exists("/routing_stub") else Path(__file__).resolve().parents[1] / "routing_stub"

PLACES = json.loads((DATA_DIR / "places.json").read_text())
ROUTES = json.loads((DATA_DIR / "routes.json").read_text())


@app.get("/health")
def health(): return {"status": "ok"}


@app.get("/geocoding/v5/mapbox.places/{query}.json")
def geocode(query: str, country: str = "ar", limit: int = 5):
    matches = PLACES.get(query.strip().lower(), [])[:limit]
    return {
        "type": "FeatureCollection",
        "features": [
            {"place_name": m["place_name"], "center": m["center"], "geometry": {"type": "Point", "coordinates": m["center"]}}
            for m in matches
        ],
    }


@app.get("/directions/v5/mapbox/driving/{waypoints}")
def directions(waypoints: str):
    distance = ROUTES.get(waypoints)
    if distance is None:
        return {"code": "NoRoute", "routes": []}
    return {"code": "Ok", "routes": [{"distance": distance, "duration": distance / 8.0}]}
