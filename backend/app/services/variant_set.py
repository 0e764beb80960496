"""
주얼리 카탈로그 가격 센터 - 변형 구성 생성/검증
금속 선택 × 스톤 옵션 조합으로 예상 변형을 만들고, 제출된 변형 목록과 대조
"""

from collections.abc import Sequence

from app.core.exceptions import (
    DefaultVariantError,
    MissingVariantsError,
    UnexpectedVariantsError,
    VariantCountMismatchError,
)
from app.schemas.pricing import ProductStoneComposition
from app.schemas.variant import (
    SelectedMetal,
    SubmittedVariant,
    ValidatedVariants,
    VariantOption,
)


def expand_variant_options(
    selected_metals: Sequence[SelectedMetal],
    stone: ProductStoneComposition,
) -> list[VariantOption]:
    """
    금속 타입 × 컬러 × 순도 × 다이아몬드 클래리티/컬러 × 젬스톤 컬러

    스톤이 없으면 해당 축은 [None] 한 개로 취급.
    중량이 0 이하인 순도는 건너뜀.
    """
    diamond_options = stone.diamond_options
    gemstone_options = stone.gemstone_options

    options = []
    for metal in selected_metals:
        for color in metal.colors:
            for purity in metal.purities:
                if purity.weight <= 0:
                    continue
                for diamond in diamond_options:
                    for gemstone in gemstone_options:
                        options.append(VariantOption(
                            metal_type=metal.metal_type_id,
                            metal_color=color.color_id,
                            metal_purity=purity.purity_id,
                            metal_weight=purity.weight,
                            diamond_clarity_color=diamond,
                            gemstone_color=gemstone,
                        ))
    return options


def expected_variant_keys(
    selected_metals: Sequence[SelectedMetal],
    stone: ProductStoneComposition,
) -> list[str]:
    return [o.key for o in expand_variant_options(selected_metals, stone)]


def validate_variants(
    expected_keys: Sequence[str],
    submitted: Sequence[SubmittedVariant],
    default_variant_id: str,
) -> ValidatedVariants:
    """
    제출된 변형 목록 검증

    검사 순서: 개수 → 누락 → 초과 → 기본 변형 존재 → 기본 표시 1개 → 기본 표시 = 기본 ID

    Raises:
        VariantValidationError: 각 검사 실패 시 해당 하위 예외
    """
    submitted_keys = [v.id for v in submitted]
    expected_set = set(expected_keys)
    submitted_set = set(submitted_keys)

    if len(expected_keys) != len(submitted_keys):
        raise VariantCountMismatchError(len(expected_keys), len(submitted_keys))

    missing = [k for k in expected_keys if k not in submitted_set]
    if missing:
        raise MissingVariantsError(missing)

    unexpected = [k for k in submitted_keys if k not in expected_set]
    if unexpected:
        raise UnexpectedVariantsError(unexpected)

    if default_variant_id not in submitted_set:
        raise DefaultVariantError("기본 변형 ID가 생성된 변형 중에 없습니다")

    defaults = [v for v in submitted if v.is_default]
    if len(defaults) != 1:
        raise DefaultVariantError("기본 변형은 정확히 1개여야 합니다")

    if defaults[0].id != default_variant_id:
        raise DefaultVariantError("기본 변형 ID가 기본으로 표시된 변형과 다릅니다")

    return ValidatedVariants(variants=list(submitted), default_variant_id=default_variant_id)
