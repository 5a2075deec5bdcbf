from __future__ import annotations

from fastapi import APIRouter
from pydantic import BaseModel

from signlearn.api.courses import PaginationOut
from signlearn.api.dependencies import CatalogDep
from signlearn.models.catalog import PackageQuery
from signlearn.models.course import Package

router = APIRouter(prefix="/packages", tags=["packages"])


class PackageAnalyticsOut(BaseModel):
    views: int
    enrollments: int


class PackageOut(BaseModel):
    id: str
    title: str
    description: str
    price: float
    ageGroups: list[str]
    targetAudience: str
    courseIds: list[str]
    features: list[str]
    popular: bool
    isActive: bool
    createdAt: int
    analytics: PackageAnalyticsOut

    @classmethod
    def from_package(cls, p: Package) -> PackageOut:
        return cls(
            id=p.id,
            title=p.title,
            description=p.description,
            price=p.price,
            ageGroups=sorted(p.age_groups),
            targetAudience=p.target_audience,
            courseIds=list(p.course_ids),
            features=list(p.features),
            popular=p.popular,
            isActive=p.is_active,
            createdAt=p.created_at,
            analytics=PackageAnalyticsOut(
                views=p.analytics.views, enrollments=p.analytics.enrollments
            ),
        )


class PackageListOut(BaseModel):
    packages: list[PackageOut]
    pagination: PaginationOut


@router.get("", response_model=PackageListOut)
async def list_packages(
    catalog: CatalogDep,
    ageGroup: str | None = None,
    targetAudience: str | None = None,
    popular: bool = False,
    search: str | None = None,
    page: int = 1,
    limit: int = 50,
) -> PackageListOut:
    result = await catalog.list_packages(
        PackageQuery(
            age_group=ageGroup,
            target_audience=targetAudience,
            popular_only=popular,
            search=search or None,
        ),
        page=page,
        limit=limit,
    )
    return PackageListOut(
        packages=[PackageOut.from_package(p) for p in result.items],
        pagination=PaginationOut(
            total=result.total,
            page=result.page,
            limit=result.limit,
            pages=result.pages,
        ),
    )


@router.get("/popular", response_model=list[PackageOut])
async def popular_packages(catalog: CatalogDep, limit: int = 5) -> list[PackageOut]:
    return [PackageOut.from_package(p) for p in await catalog.popular_packages(limit)]


@router.get("/{package_id}", response_model=PackageOut)
async def get_package(package_id: str, catalog: CatalogDep) -> PackageOut:
    return PackageOut.from_package(await catalog.get_package(package_id))
