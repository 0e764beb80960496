"""
주얼리 카탈로그 가격 센터 - 가격 계산 스키마
변형/상품 컨텍스트, 스톤 구성, 가격 구성 요소(원가/판매가/정가)
"""

from decimal import Decimal
from typing import Optional

from pydantic import Field, model_validator

from app.core.config import settings
from app.models.enums import ProductType
from app.schemas.common import CamelModel


# ============================================================================
# 통화 설정
# ============================================================================

class CurrencyConfig(CamelModel):
    """통화 최소 단위 및 세금 설정"""
    subunits: int = Field(100, gt=0, description="1 통화 단위당 최소 단위 수")
    include_tax: bool = Field(True, description="가격에 세금 포함 여부")
    tax_rate_percent: Decimal = Field(Decimal("0"), ge=0, le=100, description="세율 (%)")

    @classmethod
    def from_settings(cls) -> "CurrencyConfig":
        return cls(
            subunits=settings.CURRENCY_SUBUNITS,
            include_tax=settings.PRICE_INCLUDE_TAX,
            tax_rate_percent=settings.TAX_RATE_PERCENT,
        )


# ============================================================================
# 스톤 구성 (상품 단위, 모든 변형에 공통)
# ============================================================================

class OptionRef(CamelModel):
    """선택 옵션 참조 {"id": ...}"""
    id: str


class DiamondPricingLink(CamelModel):
    """클래리티/컬러 → 다이아몬드 단가 연결 (상품 등록 시 선택)"""
    clarity_color_id: str
    pricing_id: str = Field(..., description="스톤 단가 ID")


class DiamondEntry(CamelModel):
    shape_id: str
    total_carat: Decimal = Field(..., ge=0)
    no_of_stones: int = 0
    pricings: list[DiamondPricingLink] = []

    def pricing_for(self, clarity_color_id: str) -> Optional[DiamondPricingLink]:
        return next((p for p in self.pricings if p.clarity_color_id == clarity_color_id), None)


class DiamondDetails(CamelModel):
    clarity_colors: list[OptionRef] = Field([], description="변형 옵션으로 선택된 클래리티/컬러")
    entries: list[DiamondEntry] = []


class GemstonePricingLink(CamelModel):
    """젬스톤 컬러 → 젬스톤 단가 연결"""
    color_id: str
    pricing_id: str = Field(..., description="스톤 단가 ID")


class GemstoneEntry(CamelModel):
    type_id: str
    shape_id: str
    total_carat: Decimal = Field(..., ge=0)
    no_of_stones: int = 0
    pricings: list[GemstonePricingLink] = []

    def pricing_for(self, color_id: str) -> Optional[GemstonePricingLink]:
        return next((p for p in self.pricings if p.color_id == color_id), None)


class GemstoneDetails(CamelModel):
    quality_id: str = Field(..., description="상품 단위 젬스톤 품질 ID (단일)")
    colors: list[OptionRef] = Field([], description="변형 옵션으로 선택된 젬스톤 컬러")
    entries: list[GemstoneEntry] = []


class PearlEntry(CamelModel):
    type_id: Optional[str] = None
    quality_id: Optional[str] = None
    total_grams: Decimal = Field(Decimal("0"), ge=0)
    no_of_pearls: int = 0
    amount: Decimal = Field(Decimal("0"), ge=0, description="진주 가격 (통화 단위, 단가표 미사용)")


class PearlDetails(CamelModel):
    entries: list[PearlEntry] = []


class ProductStoneComposition(CamelModel):
    """상품 스톤 구성"""
    has_diamond: bool = False
    has_gemstone: bool = False
    has_pearl: bool = False
    diamond: Optional[DiamondDetails] = None
    gemstone: Optional[GemstoneDetails] = None
    pearl: Optional[PearlDetails] = None

    @property
    def diamond_entries(self) -> list[DiamondEntry]:
        if self.has_diamond and self.diamond:
            return self.diamond.entries
        return []

    @property
    def gemstone_entries(self) -> list[GemstoneEntry]:
        if self.has_gemstone and self.gemstone:
            return self.gemstone.entries
        return []

    @property
    def pearl_entries(self) -> list[PearlEntry]:
        if self.has_pearl and self.pearl:
            return self.pearl.entries
        return []

    @property
    def diamond_options(self) -> list[Optional[str]]:
        """변형 조합용 다이아몬드 옵션 (없으면 [None])"""
        if self.has_diamond and self.diamond and self.diamond.clarity_colors:
            return [c.id for c in self.diamond.clarity_colors]
        return [None]

    @property
    def gemstone_options(self) -> list[Optional[str]]:
        """변형 조합용 젬스톤 옵션 (없으면 [None])"""
        if self.has_gemstone and self.gemstone and self.gemstone.colors:
            return [c.id for c in self.gemstone.colors]
        return [None]


class ProductAttributes(CamelModel):
    """카테고리/태그/뱃지 연결 (가격 규칙 매칭용)"""
    categories: list[OptionRef] = []
    tags: list[OptionRef] = []
    badges: list[OptionRef] = []

    @property
    def category_ids(self) -> set[str]:
        return {c.id for c in self.categories}

    @property
    def tag_ids(self) -> set[str]:
        return {t.id for t in self.tags}

    @property
    def badge_ids(self) -> set[str]:
        return {b.id for b in self.badges}


class ProductPricingContext(CamelModel):
    """가격 계산에 필요한 상품 단위 컨텍스트"""
    product_type: str = ProductType.JEWELLERY_DEFAULT.value
    stone: ProductStoneComposition = ProductStoneComposition()
    attributes: ProductAttributes = ProductAttributes()

    @classmethod
    def from_product(cls, product_type: Optional[str], metadata: Optional[dict]) -> "ProductPricingContext":
        """products.metadata JSON → 컨텍스트"""
        metadata = metadata or {}
        return cls.model_validate({
            "productType": product_type or ProductType.JEWELLERY_DEFAULT.value,
            "stone": metadata.get("stone") or {},
            "attributes": metadata.get("attributes") or {},
        })


class VariantContext(CamelModel):
    """변형 선택 옵션 (product_variants.metadata와 동일한 키)"""
    metal_type: str
    metal_color: str
    metal_purity: str
    metal_weight: Decimal = Field(Decimal("0"), ge=0, description="금속 중량 (g)")
    diamond_clarity_color: Optional[str] = None
    gemstone_color: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _fallback_metal_weight(cls, data):
        """이전 형식 메타데이터는 weights.metal.grams 에만 중량이 있음"""
        if isinstance(data, dict) and not data.get("metalWeight") and not data.get("metal_weight"):
            grams = ((data.get("weights") or {}).get("metal") or {}).get("grams")
            if grams:
                return {**data, "metalWeight": grams}
        return data


# ============================================================================
# 가격 구성 요소
# ============================================================================

class PriceComponents(CamelModel):
    """한 가격 단계(원가/판매가/정가)의 구성 요소 (통화 최소 단위)"""
    metal_price: int
    making_charge: int
    diamond_price: int
    gemstone_price: int
    pearl_price: int
    final_price_without_tax: int
    tax_amount: int
    final_price_with_tax: int
    tax_included: bool
    final_price: int


class PricingResult(CamelModel):
    """변형 가격 계산 결과 (price_components JSON으로 저장)"""
    cost: PriceComponents = Field(..., alias="costPrice")
    selling: PriceComponents = Field(..., alias="sellingPrice")
    compare_at: PriceComponents = Field(..., alias="compareAtPrice")

    def to_storage(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
