# goout_calendar/api/routes/index.py
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, Request, status
from fastapi.responses import HTMLResponse

from goout_calendar.schemas.calendar import LongtermHandling
from goout_calendar.services.subscription import (
    InvalidTextualId,
    SubscriptionUrls,
    subscription_urls,
    text_to_user_id,
)

router = APIRouter(tags=["Index"])

INDEX_HTML = """<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1">
    <title>GoOut Calendar Exporter</title>
</head>
<body>
<section>
    <h1>GoOut Calendar Exporter</h1>
    <p>
        A small proxy web service that serves events liked by a given user of
        <a href="https://goout.net/">GoOut.net</a> in the iCalendar format.
    </p>
    <form id="subscription">
        <label>Textual user id from your GoOut profile URL
            <input id="user" name="user" required></label>
        <label>Language
            <select id="language" name="language">
                <option value="en">English</option>
                <option value="cs">Czech</option>
            </select></label>
        <label>After <input id="after" name="after" type="date"></label>
        <label>Long-term events
            <select id="longterm" name="longterm">
                <option value="preserve">as they are</option>
                <option value="split">split into begin and end</option>
                <option value="aggregate">aggregated</option>
            </select></label>
    </form>
    <p>HTTP: <a id="a-http"></a></p>
    <p>Webcal: <a id="a-webcal"></a></p>
</section>
<script>
document.getElementById("subscription").addEventListener("input", async function () {
    var params = new URLSearchParams(new FormData(this));
    for (var [key, value] of Array.from(params.entries())) {
        if (!value) params.delete(key);
    }
    var response = await fetch("subscription?" + params);
    var body = await response.json();
    for (var kind of ["http", "webcal"]) {
        var link = document.getElementById("a-" + kind);
        link.textContent = response.ok ? body[kind] : body.detail;
        link.href = response.ok ? body[kind] : "";
    }
});
</script>
</body>
</html>
"""


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
async def index() -> HTMLResponse:
    return HTMLResponse(INDEX_HTML)


@router.get(
    "/subscription",
    response_model=SubscriptionUrls,
    summary="Build calendar subscription URLs",
    responses={400: {"description": "The textual user id contains invalid characters."}},
)
async def subscription(
    request: Request,
    user: str = Query(..., min_length=1, description="Textual id from a GoOut profile URL."),
    language: str = Query("en", min_length=1),
    after: Optional[str] = Query(None),
    longterm: Optional[LongtermHandling] = Query(None),
) -> SubscriptionUrls:
    try:
        user_id = text_to_user_id(user)
    except InvalidTextualId as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return subscription_urls(str(request.base_url), user_id, language, after, longterm)
