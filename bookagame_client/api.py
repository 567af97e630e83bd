"""HTTP client for the Book a Game REST API.

One ``ApiClient`` wraps one ``requests.Session``. Every request carries the
stored access token as a bearer header; a 401 triggers a single token refresh
followed by exactly one retry of the original request. Response bodies are
normalised into the pydantic models of ``bookagame_client.models`` here, at
the boundary, so the rest of the client never sees raw JSON.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Type, TypeVar

import requests
from pydantic import BaseModel, ValidationError

from bookagame_client import config
from bookagame_client.errors import ApiError, ResponseParseError, message_from_response
from bookagame_client.models import (
    AuthTokens,
    BlockedSlot,
    BlockedSlotRequest,
    Booking,
    Court,
    CourtRequest,
    CreateBookingRequest,
    DashboardStats,
    EarningsSummary,
    Favorite,
    LoginRequest,
    OwnerBooking,
    ProfileUpdate,
    RegisterRequest,
    Review,
    ReviewRequest,
    TimeSlot,
    Venue,
    VenueListItem,
    VenueRequest,
    WalkinRequest,
)
from bookagame_client.tokens import TokenStore

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

Payload = Any


def _clean_params(params: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Drops unset query parameters and lower-cases booleans."""
    cleaned = {}
    for key, value in (params or {}).items():
        if value is None:
            continue
        cleaned[key] = str(value).lower() if isinstance(value, bool) else value
    return cleaned


def _unwrap(payload: Payload, keys: Iterable[str]) -> Payload:
    """Returns the first envelope value found under ``keys``, else the payload itself."""
    if isinstance(payload, dict):
        for key in keys:
            if key in payload and payload[key] is not None:
                return payload[key]
    return payload


def parse_list(model: Type[ModelT], payload: Payload, keys: Iterable[str] = ("data",)) -> List[ModelT]:
    """Validates a list response, accepting a bare list or a list inside one envelope key."""
    items = _unwrap(payload, keys)
    if isinstance(items, dict):
        # {"data": {"bookings": [...]}} is common enough to accept one extra level.
        items = _unwrap(items, keys)
    if not isinstance(items, list):
        raise ResponseParseError(f"Expected a list of {model.__name__}, got {type(items).__name__}.")
    try:
        return [model.model_validate(item) for item in items]
    except ValidationError as e:
        raise ResponseParseError(f"Invalid {model.__name__} in response: {e}") from e


def parse_item(
    model: Type[ModelT], payload: Payload, keys: Iterable[str] = ("data",), required: bool = True
) -> Optional[ModelT]:
    """Validates a single-object response.

    With ``required=False`` a body that carries no object at all (for example a
    bare ``{"message": "..."}`` acknowledgement) yields ``None``; a body that
    carries an object which fails validation always raises.
    """
    keys = tuple(keys)
    item = _unwrap(payload, keys)
    if isinstance(item, dict) and item is not payload and any(k in item for k in keys):
        item = _unwrap(item, keys)
    if not required and (not isinstance(item, dict) or (item is payload and "id" not in item)):
        return None
    if not isinstance(item, dict):
        raise ResponseParseError(f"Expected a {model.__name__} object, got {type(item).__name__}.")
    try:
        return model.model_validate(item)
    except ValidationError as e:
        raise ResponseParseError(f"Invalid {model.__name__} in response: {e}") from e


class ApiClient:
    """Thin wrapper over the REST API with bearer auth and refresh-on-401."""

    def __init__(
        self,
        base_url: str = config.API_URL,
        tokens: Optional[TokenStore] = None,
        timeout: float = config.REQUEST_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.tokens = tokens if tokens is not None else TokenStore()
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(config.COMMON_HEADERS)
        self.owner = OwnerApi(self)

    def build_url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    # --- Transport ---

    def _send(self, method: str, path: str, params: Optional[Dict], body: Optional[Dict]) -> requests.Response:
        url = self.build_url(path)
        headers = {}
        token = self.tokens.get_access_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"

        logger.debug(f"{method} {url} params={params}")
        try:
            response = self.session.request(
                method, url, params=_clean_params(params), json=body, headers=headers, timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"{method} {url} failed: {e}")
            raise ApiError(str(e) or "Network error") from e
        logger.debug(f"Response status: {response.status_code}")
        return response

    def _refresh_tokens(self) -> bool:
        """Exchanges the stored refresh token for a new token pair.

        Returns True when new tokens were stored. Any failure clears both tokens.
        """
        refresh_token = self.tokens.get_refresh_token()
        if not refresh_token:
            return False

        logger.info("Access token rejected, refreshing session")
        try:
            response = self.session.post(
                self.build_url("/auth/refresh"),
                json={"refresh_token": refresh_token},
                timeout=self.timeout,
            )
            response.raise_for_status()
            body = response.json()
            if not body.get("success"):
                logger.warning("Token refresh was not successful")
                return False
            new_tokens = AuthTokens.model_validate(body["data"]["session"])
        except (requests.exceptions.RequestException, ValueError, KeyError, TypeError, AttributeError) as e:
            logger.warning(f"Token refresh failed, clearing session: {e}")
            self.tokens.clear_tokens()
            return False

        self.tokens.set_tokens(new_tokens.access_token, new_tokens.refresh_token)
        return True

    def request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> Payload:
        """Performs one API call and returns the decoded JSON body (or None when empty)."""
        response = self._send(method, path, params, json)
        if response.status_code == 401 and self._refresh_tokens():
            response = self._send(method, path, params, json)

        if not response.ok:
            try:
                payload = response.json()
            except ValueError:
                payload = None
            message = message_from_response(response)
            logger.error(f"{method} {path} returned {response.status_code}: {message}")
            raise ApiError(message, response.status_code, payload if isinstance(payload, dict) else None)

        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise ResponseParseError(f"{method} {path} returned invalid JSON.") from e

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Payload:
        return self.request("GET", path, params=params)

    def post(self, path: str, json: Optional[Dict[str, Any]] = None) -> Payload:
        return self.request("POST", path, json=json)

    def put(self, path: str, json: Optional[Dict[str, Any]] = None) -> Payload:
        return self.request("PUT", path, json=json)

    def delete(self, path: str) -> Payload:
        return self.request("DELETE", path)

    # --- Auth ---
    # Auth bodies are returned raw; AuthSession interprets them.

    def login(self, credentials: LoginRequest) -> Dict:
        return self.post("/auth/login", credentials.model_dump()) or {}

    def register_user(self, data: RegisterRequest) -> Dict:
        return self.post("/auth/register/user", data.model_dump(exclude_none=True)) or {}

    def register_owner(self, data: RegisterRequest) -> Dict:
        return self.post("/auth/register/owner", data.model_dump(exclude_none=True)) or {}

    def logout(self):
        self.post("/auth/logout")

    def get_me(self) -> Dict:
        return self.get("/auth/me") or {}

    def update_me(self, changes: ProfileUpdate) -> Dict:
        return self.put("/auth/me", changes.model_dump(exclude_none=True)) or {}

    # --- Venues ---

    def get_venues(
        self,
        sport_type: Optional[str] = None,
        lat: Optional[float] = None,
        lng: Optional[float] = None,
        radius: Optional[float] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[VenueListItem]:
        params = {"sport_type": sport_type, "lat": lat, "lng": lng, "radius": radius, "limit": limit, "offset": offset}
        return parse_list(VenueListItem, self.get("/venues", params), ("data", "venues"))

    def get_venue(self, venue_id: str) -> Venue:
        return parse_item(Venue, self.get(f"/venues/{venue_id}"), ("data", "venue"))

    def get_venue_availability(self, venue_id: str) -> Dict:
        # Shape is owned by the server and only displayed, so it stays a dict.
        payload = _unwrap(self.get(f"/venues/{venue_id}/availability"), ("data",))
        if not isinstance(payload, dict):
            raise ResponseParseError("Expected an availability object.")
        return payload

    def get_venue_reviews(self, venue_id: str, limit: Optional[int] = None, offset: Optional[int] = None) -> List[Review]:
        payload = self.get(f"/venues/{venue_id}/reviews", {"limit": limit, "offset": offset})
        return parse_list(Review, payload, ("data", "reviews"))

    def get_sport_types(self) -> List[str]:
        items = _unwrap(self.get("/venues/sports"), ("data", "sports", "sport_types"))
        if not isinstance(items, list):
            raise ResponseParseError("Expected a list of sport types.")
        sports = []
        for item in items:
            if isinstance(item, str):
                sports.append(item)
            elif isinstance(item, dict) and isinstance(item.get("name"), str):
                sports.append(item["name"])
            else:
                raise ResponseParseError(f"Invalid sport type entry: {item!r}")
        return sports

    # --- Court slots ---

    def get_court_slots(self, court_id: str, date: str) -> List[TimeSlot]:
        """Fetches the slot snapshot for one court and date, sorted by start time."""
        payload = self.get(f"/courts/{court_id}/slots", {"date": date})
        slots = parse_list(TimeSlot, payload, ("available_slots", "data", "slots"))
        return sorted(slots, key=lambda s: s.start_time)

    # --- Favorites ---

    def get_favorites(self) -> List[Favorite]:
        return parse_list(Favorite, self.get("/users/favorites"), ("data", "favorites"))

    def add_favorite(self, venue_id: str):
        self.post(f"/users/favorites/{venue_id}")

    def remove_favorite(self, venue_id: str):
        self.delete(f"/users/favorites/{venue_id}")

    # --- Bookings ---

    def get_bookings(self, status: Optional[str] = None, upcoming: Optional[bool] = None) -> List[Booking]:
        payload = self.get("/bookings", {"status": status, "upcoming": upcoming})
        return parse_list(Booking, payload, ("data", "bookings"))

    def get_booking(self, booking_id: str) -> Booking:
        return parse_item(Booking, self.get(f"/bookings/{booking_id}"), ("data", "booking"))

    def create_booking(self, data: CreateBookingRequest) -> Optional[Booking]:
        payload = self.post("/bookings", data.model_dump())
        return parse_item(Booking, payload, ("data", "booking"), required=False)

    def cancel_booking(self, booking_id: str, reason: Optional[str] = None) -> Optional[Booking]:
        payload = self.post(f"/bookings/{booking_id}/cancel", {"reason": reason})
        return parse_item(Booking, payload, ("data", "booking"), required=False)

    # --- Reviews ---

    def submit_review(self, booking_id: str, data: ReviewRequest) -> Optional[Review]:
        payload = self.post(f"/reviews/bookings/{booking_id}/review", data.model_dump(exclude_none=True))
        return parse_item(Review, payload, ("data", "review"), required=False)

    def get_my_reviews(self) -> List[Review]:
        return parse_list(Review, self.get("/reviews/my-reviews"), ("data", "reviews"))


class OwnerApi:
    """Owner-scoped endpoints, reached as ``client.owner``."""

    def __init__(self, client: ApiClient):
        self.client = client

    def get_venues(self) -> List[Venue]:
        return parse_list(Venue, self.client.get("/owner/venues"), ("data", "venues"))

    def create_venue(self, data: VenueRequest) -> Optional[Venue]:
        payload = self.client.post("/owner/venues", data.model_dump())
        return parse_item(Venue, payload, ("data", "venue"), required=False)

    def update_venue(self, venue_id: str, data: VenueRequest) -> Optional[Venue]:
        payload = self.client.put(f"/owner/venues/{venue_id}", data.model_dump())
        return parse_item(Venue, payload, ("data", "venue"), required=False)

    def delete_venue(self, venue_id: str):
        self.client.delete(f"/owner/venues/{venue_id}")

    def get_venue_courts(self, venue_id: str) -> List[Court]:
        return parse_list(Court, self.client.get(f"/owner/venues/{venue_id}/courts"), ("data", "courts"))

    def create_court(self, venue_id: str, data: CourtRequest) -> Optional[Court]:
        # Updates go through the same endpoint with the court id in the body.
        payload = self.client.post(f"/owner/venues/{venue_id}/courts", data.model_dump(exclude_none=True))
        return parse_item(Court, payload, ("data", "court"), required=False)

    def get_bookings(self, date: Optional[str] = None, court_id: Optional[str] = None) -> List[OwnerBooking]:
        payload = self.client.get("/owner/bookings", {"date": date, "court_id": court_id})
        return parse_list(OwnerBooking, payload, ("data", "bookings"))

    def get_earnings_summary(self) -> EarningsSummary:
        return parse_item(EarningsSummary, self.client.get("/owner/earnings/summary"), ("data", "summary"))

    def get_dashboard_stats(self) -> DashboardStats:
        return parse_item(DashboardStats, self.client.get("/owner/dashboard/stats"), ("data", "stats"))

    def get_blocked_slots(self, court_id: str) -> List[BlockedSlot]:
        payload = self.client.get(f"/owner/courts/{court_id}/blocked-slots")
        return parse_list(BlockedSlot, payload, ("data", "blocked_slots"))

    def create_blocked_slot(self, court_id: str, data: BlockedSlotRequest) -> Optional[BlockedSlot]:
        payload = self.client.post(f"/owner/courts/{court_id}/blocked-slots", data.model_dump(exclude_none=True))
        return parse_item(BlockedSlot, payload, ("data", "blocked_slot"), required=False)

    def delete_blocked_slot(self, slot_id: str):
        self.client.delete(f"/owner/blocked-slots/{slot_id}")

    def create_walkin(self, data: WalkinRequest) -> Optional[OwnerBooking]:
        payload = self.client.post("/owner/bookings/walk-in", data.model_dump())
        return parse_item(OwnerBooking, payload, ("data", "booking"), required=False)
