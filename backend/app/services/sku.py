"""
주얼리 카탈로그 가격 센터 - 변형 SKU 생성
상품 SKU 뒤에 설정된 순서대로 (구분자 + 옵션 slug)를 붙임
"""

from collections.abc import Mapping, Sequence
from typing import Optional

from app.models.enums import ProductType
from app.schemas.common import CamelModel


class SkuComponent(CamelModel):
    key: str
    separator: str = ""


# 상품 SKU가 시작 값이므로 옵션 구성 요소만 나열
JEWELLERY_DEFAULT_SKU_COMPONENTS: tuple[SkuComponent, ...] = (
    SkuComponent(key="metalPurity", separator="_"),
    SkuComponent(key="metalColor", separator=""),
    SkuComponent(key="metalType", separator=""),
    SkuComponent(key="diamondClarityColor", separator="-"),
    SkuComponent(key="gemstoneColor", separator="-"),
)

SKU_COMPONENTS_BY_TYPE: dict[ProductType, tuple[SkuComponent, ...]] = {
    ProductType.JEWELLERY_DEFAULT: JEWELLERY_DEFAULT_SKU_COMPONENTS,
}


def build_sku(
    components: Sequence[SkuComponent],
    values: Mapping[str, Optional[str]],
    base_sku: str,
) -> str:
    """
    변형 SKU 생성

    값이 없는 구성 요소(다이아몬드/젬스톤 미선택 등)는 구분자까지 생략.
    예: base "RING01", 18k/yellow/gold → "RING01_18kyellowgold"
    """
    sku = base_sku
    for component in components:
        value = values.get(component.key)
        if value:
            sku += component.separator + value
    return sku
