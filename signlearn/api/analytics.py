from __future__ import annotations

from fastapi import APIRouter
from pydantic import BaseModel

from signlearn.api.courses import CourseOut
from signlearn.api.dependencies import StoreDep
from signlearn.api.packages import PackageOut
from signlearn.services import analytics_service

router = APIRouter(prefix="/analytics", tags=["analytics"])


class StatsOut(BaseModel):
    totalCourses: int
    totalPackages: int
    totalUsers: int


class DashboardOut(BaseModel):
    stats: StatsOut
    popularCourses: list[CourseOut]
    popularPackages: list[PackageOut]


@router.get("/dashboard", response_model=DashboardOut)
async def dashboard(store: StoreDep) -> DashboardOut:
    d = await analytics_service.dashboard(store)
    return DashboardOut(
        stats=StatsOut(
            totalCourses=d.total_courses,
            totalPackages=d.total_packages,
            totalUsers=d.total_users,
        ),
        popularCourses=[CourseOut.from_course(c) for c in d.popular_courses],
        popularPackages=[PackageOut.from_package(p) for p in d.popular_packages],
    )
