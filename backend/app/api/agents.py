"""Agents API: agent profile records keyed by the auth provider's user id."""
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.models.agent import Agent
from app.schemas.agent import AgentCreate, AgentUpdate
from app.services.reporting import ReportingService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/agents", tags=["agents"])


def _get_agent_or_404(db: Session, agent_id: str) -> Agent:
    agent = db.query(Agent).filter(Agent.id == agent_id).first()
    if not agent:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Agent not found")
    return agent


@router.post("/", status_code=status.HTTP_201_CREATED)
def register_agent(agent_data: AgentCreate, db: Session = Depends(get_db)):
    """Create the profile record for a freshly registered agent."""
    if db.query(Agent).filter(Agent.id == agent_data.id).first():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Agent profile already exists",
        )

    agent = Agent(**agent_data.model_dump())
    db.add(agent)
    try:
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error("Agent registration failed for %s: %s", agent_data.id, e)
        raise HTTPException(status_code=500, detail=f"Could not save agent profile: {str(e)}")
    db.refresh(agent)

    logger.info("Registered agent %s (%s)", agent.id, agent.agent_code)
    return _agent_to_dict(agent)


@router.get("/{agent_id}")
def get_agent(agent_id: str, db: Session = Depends(get_db)):
    return _agent_to_dict(_get_agent_or_404(db, agent_id))


@router.patch("/{agent_id}")
def update_agent(agent_id: str, agent_update: AgentUpdate, db: Session = Depends(get_db)):
    """Profile edit. The agent code is fixed at registration."""
    agent = _get_agent_or_404(db, agent_id)

    for field, value in agent_update.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(agent, field, value)

    try:
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error("Profile update failed for agent %s: %s", agent_id, e)
        raise HTTPException(status_code=500, detail=f"Could not update profile: {str(e)}")
    db.refresh(agent)
    return _agent_to_dict(agent)


@router.get("/{agent_id}/performance")
def agent_performance(agent_id: str, db: Session = Depends(get_db)):
    """Client and policy counts shown on the agent's profile."""
    _get_agent_or_404(db, agent_id)
    return {"agent_id": agent_id, **ReportingService(db).agent_performance()}


# ── Helpers ────────────────────────────────────────────────────────

def _agent_to_dict(a: Agent) -> dict:
    return {
        "id": a.id,
        "name": a.name,
        "email": a.email,
        "phone": a.phone,
        "address": a.address,
        "agent_code": a.agent_code,
        "photo_url": a.photo_url or "",
        "joined_at": a.joined_at.isoformat() if a.joined_at else None,
    }
