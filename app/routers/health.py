"""Health recommendations router - AI guidance for birth health issues."""

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from app.core.deps import get_db, require_csrf_header, require_roles
from app.core.rate_limit import ai_limit, limiter
from app.db.enums import Role
from app.schemas.auth import UserSession
from app.schemas.health import HealthRecommendationRequest, HealthRecommendationResponse
from app.services import child_service, health_recommendation_service
from app.utils.dates import describe_age, today_in_timezone

router = APIRouter()

require_parent = require_roles([Role.PARENT])


@router.post(
    "/health-recommendations",
    response_model=HealthRecommendationResponse,
    dependencies=[Depends(require_csrf_header)],
)
@limiter.limit(ai_limit)
async def request_recommendations(
    request: Request,
    data: HealthRecommendationRequest,
    tz: str | None = Query(None, max_length=64),
    session: UserSession = Depends(require_parent),
    db: Session = Depends(get_db),
):
    """
    Ask the AI gateway for care guidance.

    With child_id, the stored child's issues, name and age are used.
    """
    if data.child_id:
        child = child_service.get_child(db, session.user_id, data.child_id)
        if not child:
            raise HTTPException(status_code=404, detail="Child not found")
        health_issues = child.birth_health_issues
        child_name = child.name
        age_label = describe_age(child.date_of_birth, today_in_timezone(tz))
    else:
        if not data.child_name or not data.age_label:
            raise HTTPException(
                status_code=422, detail="child_id or child_name and age_label are required"
            )
        health_issues = data.health_issues
        child_name = data.child_name
        age_label = data.age_label

    try:
        text = await health_recommendation_service.request_health_recommendations(
            health_issues, child_name, age_label
        )
    except health_recommendation_service.InvalidRecommendationRequestError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except health_recommendation_service.RecommendationsUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except health_recommendation_service.RateLimitedError as e:
        raise HTTPException(status_code=429, detail=str(e))
    except health_recommendation_service.PaymentRequiredError as e:
        raise HTTPException(status_code=402, detail=str(e))
    except health_recommendation_service.UpstreamError as e:
        raise HTTPException(status_code=502, detail=str(e))

    return HealthRecommendationResponse(recommendations=text)
