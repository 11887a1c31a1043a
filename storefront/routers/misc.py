"""
Misc Router

Age gate: the storefront sells age-restricted products, so visitors confirm
they are over 18 once per browser.
"""
from fastapi import APIRouter, Request, Response

from .models import AgeVerificationRequest

router = APIRouter(tags=["misc"])

AGE_VERIFIED_COOKIE = "age_verified"
AGE_VERIFIED_MAX_AGE = 365 * 24 * 3600
UNDERAGE_REDIRECT_URL = "https://www.google.com"


@router.get("/age-verification")
async def get_age_verification(request: Request):
    return {"verified": request.cookies.get(AGE_VERIFIED_COOKIE) == "true"}


@router.post("/age-verification")
async def submit_age_verification(body: AgeVerificationRequest, response: Response):
    if not body.is_over_18:
        return {"verified": False, "redirect_url": UNDERAGE_REDIRECT_URL}

    response.set_cookie(
        AGE_VERIFIED_COOKIE,
        "true",
        max_age=AGE_VERIFIED_MAX_AGE,
        samesite="lax",
    )
    return {"verified": True, "redirect_url": None}
