"""
test_master_data.py — Tests for the master data snapshot loader (in-memory SQLite).

Tests cover:
  - Active option ID sets grouped by stone group
  - Metal colors keep their owning metal type
  - Inactive rows are excluded from option sets
"""

from app.models.master_data import MetalColor, StoneColor, StoneQuality, StoneShape, StoneType
from app.services.master_data import load_master_data_snapshot


class TestOptionSets:

    def _seed_stones(self, session):
        session.add_all([
            StoneShape(id="round", name="Round", slug="rd"),
            StoneShape(id="heart", name="Heart", slug="ht", status=False),
            StoneQuality(id="vvs-ef", stone_group="diamond", name="VVS EF", slug="vvsef"),
            StoneQuality(id="aaa", stone_group="gemstone", name="AAA", slug="aaa"),
            StoneQuality(id="aa", stone_group="pearl", name="AA", slug="aa"),
            StoneType(id="ruby", stone_group="gemstone", name="Ruby", slug="ruby"),
            StoneType(id="akoya", stone_group="pearl", name="Akoya", slug="akoya"),
            StoneColor(id="red", stone_group="gemstone", name="Red", slug="red"),
            MetalColor(id="oxidised", metal_type_id="silver", name="Oxidised", slug="ox"),
        ])
        session.commit()

    def test_loads_ids_by_group(self, seeded_db):
        self._seed_stones(seeded_db)

        options = load_master_data_snapshot(seeded_db).options

        assert options.metal_types == {"gold"}
        assert options.metal_colors == {"yellow": "gold", "oxidised": "silver"}
        assert options.diamond_clarity_colors == {"vvs-ef"}
        assert options.gemstone_qualities == {"aaa"}
        assert options.pearl_qualities == {"aa"}
        assert options.gemstone_types == {"ruby"}
        assert options.pearl_types == {"akoya"}
        assert options.gemstone_colors == {"red"}

    def test_inactive_rows_excluded(self, seeded_db):
        self._seed_stones(seeded_db)

        options = load_master_data_snapshot(seeded_db).options

        assert options.stone_shapes == {"round"}
