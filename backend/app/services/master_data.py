"""
주얼리 카탈로그 가격 센터 - 마스터 데이터 스냅샷 로더
가격 계산에 필요한 활성 마스터 데이터를 한 번에 읽어 불변 스냅샷으로 반환
"""

import logging

from sqlalchemy.orm import Session

from app.models.master_data import (
    MetalType,
    MetalColor,
    MetalPurity,
    StoneShape,
    StoneType,
    StoneQuality,
    StoneColor,
    StonePrice,
    MakingCharge,
    OtherCharge,
    MrpMarkup,
    PricingRule,
)
from app.schemas.master_data import (
    MasterDataSnapshot,
    MasterOptionSets,
    MetalPurityRow,
    MakingChargeRow,
    OtherChargeRow,
    StonePriceRow,
    MrpMarkupConfig,
)
from app.schemas.pricing_rule import PricingRuleConfig

logger = logging.getLogger(__name__)


def _load_option_slugs(session: Session) -> dict[str, str]:
    """변형 SKU 생성용 옵션 ID → slug"""
    slugs: dict[str, str] = {}

    for model in (MetalType, MetalColor, MetalPurity):
        for row_id, slug in session.query(model.id, model.slug).all():
            slugs[row_id] = slug

    # 다이아몬드 클래리티/컬러는 품질 테이블, 젬스톤 변형 옵션은 컬러 테이블
    diamond_qualities = session.query(StoneQuality.id, StoneQuality.slug).filter(
        StoneQuality.stone_group == "diamond"
    ).all()
    gemstone_colors = session.query(StoneColor.id, StoneColor.slug).filter(
        StoneColor.stone_group == "gemstone"
    ).all()
    for row_id, slug in [*diamond_qualities, *gemstone_colors]:
        slugs[row_id] = slug

    return slugs


def _active_ids(session: Session, model, stone_group: str | None = None) -> frozenset[str]:
    query = session.query(model.id).filter(model.status == True)
    if stone_group is not None:
        query = query.filter(model.stone_group == stone_group)
    return frozenset(row_id for (row_id,) in query.all())


def _load_option_sets(session: Session) -> MasterOptionSets:
    """상품 옵션 선택 검증용 활성 ID 집합"""
    metal_colors = session.query(MetalColor.id, MetalColor.metal_type_id).filter(
        MetalColor.status == True
    ).all()

    return MasterOptionSets(
        metal_types=_active_ids(session, MetalType),
        metal_colors=dict(metal_colors),
        diamond_clarity_colors=_active_ids(session, StoneQuality, "diamond"),
        stone_shapes=_active_ids(session, StoneShape),
        gemstone_types=_active_ids(session, StoneType, "gemstone"),
        gemstone_qualities=_active_ids(session, StoneQuality, "gemstone"),
        gemstone_colors=_active_ids(session, StoneColor, "gemstone"),
        pearl_types=_active_ids(session, StoneType, "pearl"),
        pearl_qualities=_active_ids(session, StoneQuality, "pearl"),
    )


def load_master_data_snapshot(session: Session) -> MasterDataSnapshot:
    """
    마스터 데이터 스냅샷 조회

    - 상태가 활성인 금속 순도/스톤 단가/세공비/기타 비용
    - MRP 마크업 (행이 없으면 전부 0)
    - 활성 가격 규칙 (저장 JSON 검증 후 태그드 유니온으로 변환)
    """
    metal_purities = session.query(MetalPurity).filter(MetalPurity.status == True).all()
    stone_prices = session.query(StonePrice).filter(StonePrice.status == True).all()
    making_charges = session.query(MakingCharge).filter(MakingCharge.status == True).all()
    other_charges = session.query(OtherCharge).filter(OtherCharge.status == True).all()
    mrp_markup = session.query(MrpMarkup).first()
    pricing_rules = session.query(PricingRule).filter(PricingRule.is_active == True).all()

    snapshot = MasterDataSnapshot(
        metal_purities=[
            MetalPurityRow(id=p.id, metal_type_id=p.metal_type_id, price=p.price, slug=p.slug)
            for p in metal_purities
        ],
        stone_prices=[
            StonePriceRow(
                id=s.id,
                stone_type_id=s.stone_type_id,
                stone_shape_id=s.stone_shape_id,
                stone_quality_id=s.stone_quality_id,
                stone_color_id=s.stone_color_id,
                ct_from=s.ct_from,
                ct_to=s.ct_to,
                price=s.price,
            )
            for s in stone_prices
        ],
        making_charges=[
            MakingChargeRow(
                id=m.id,
                metal_type_id=m.metal_type_id,
                weight_from=m.weight_from,
                weight_to=m.weight_to,
                is_fixed_pricing=m.is_fixed_pricing,
                amount=m.amount,
            )
            for m in making_charges
        ],
        other_charges=[
            OtherChargeRow(id=c.id, name=c.name, amount=c.amount)
            for c in other_charges
        ],
        mrp_markup=MrpMarkupConfig(
            diamond=mrp_markup.diamond,
            gemstone=mrp_markup.gemstone,
            pearl=mrp_markup.pearl,
            making_charge=mrp_markup.making_charge,
        ) if mrp_markup else MrpMarkupConfig(),
        pricing_rules=[
            PricingRuleConfig.model_validate({
                "id": r.id,
                "name": r.name,
                "productType": r.product_type,
                "conditions": r.conditions or [],
                "actions": r.actions or {},
                "isActive": r.is_active,
            })
            for r in pricing_rules
        ],
        option_slugs=_load_option_slugs(session),
        options=_load_option_sets(session),
    )

    logger.debug(
        f"[MasterData] 스냅샷 로드: 순도 {len(snapshot.metal_purities)}, "
        f"스톤 단가 {len(snapshot.stone_prices)}, 세공비 {len(snapshot.making_charges)}, "
        f"규칙 {len(snapshot.pricing_rules)}"
    )
    return snapshot
