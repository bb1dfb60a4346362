"""Tests for tech transfers, growth and high-tech notices."""

import pytest

from farhorizons.engine.technology import (
    announce_high_tech,
    apply_knowledge_transfers,
    apply_tech_transfers,
    grow_tech_level,
    report_transfers_to_donor,
    tech_transfer_cost,
)
from farhorizons.errors import ConfigurationError
from farhorizons.models import Tech, Transaction, TransactionType
from farhorizons.models.transaction import TECH_TRANSFER_NOT_FUNDED, TECH_TRANSFER_OFFER_TOO_LOW
from farhorizons.utils import EventLog, GameRNG


def tech_transfer(tech: Tech, offered_level: int, budget: int = 0) -> Transaction:
    """Kzinti (2) offer Humans (1) a tech up to offered_level."""
    return Transaction(
        type=TransactionType.TECH_TRANSFER,
        donor=2,
        recipient=1,
        value=tech,
        number_1=budget,
        name_1="Kzinti",
        name_2="Humans",
        number_3=offered_level,
    )


class TestTechTransfer:
    """Test tech transfers between species."""

    def test_cost_formula(self):
        """Test a transfer costs three quarters of the level squared."""
        assert tech_transfer_cost(10) == 75
        assert tech_transfer_cost(3) == 7
        assert tech_transfer_cost(1) == 1

    def test_offer_below_own_level(self, galaxy):
        """Test an offer of 10 to a species at 12 fails and changes nothing."""
        humans, kzinti = galaxy.species
        humans.tech_level[Tech.ML] = 12
        t = tech_transfer(Tech.ML, 10)
        log = EventLog()

        apply_tech_transfers(galaxy, humans, [t], log)

        assert t.number_1 == TECH_TRANSFER_OFFER_TOO_LOW
        assert humans.tech_level[Tech.ML] == 12
        assert kzinti.econ_units == 500
        assert log.text() == "  Military tech transfer from SP Kzinti failed.\n"

    def test_not_funded(self, galaxy):
        """Test a donor who cannot pay for one level fails for lack of funding."""
        humans, kzinti = galaxy.species
        humans.tech_level[Tech.ML] = 10
        kzinti.econ_units = 50
        t = tech_transfer(Tech.ML, 12)
        log = EventLog()

        apply_tech_transfers(galaxy, humans, [t], log)

        assert t.number_1 == TECH_TRANSFER_NOT_FUNDED
        assert humans.tech_level[Tech.ML] == 10
        assert kzinti.econ_units == 50
        assert log.text().endswith("failed due to lack of funding.\n")

    def test_budget_defaults_to_treasury(self, galaxy):
        """Test a zero budget lets the donor spend its whole treasury."""
        humans, kzinti = galaxy.species
        humans.tech_level[Tech.GV] = 3
        t = tech_transfer(Tech.GV, 6)
        log = EventLog()

        apply_tech_transfers(galaxy, humans, [t], log)

        # 7 + 12 + 19 for levels 3, 4 and 5
        assert humans.tech_level[Tech.GV] == 6
        assert kzinti.econ_units == 500 - 38
        assert (t.number_1, t.number_2, t.number_3) == (38, 3, 6)
        assert "raised your tech level from 3 to 6 at a cost to them of 38" in log.text()

    def test_budget_limits_levels(self, galaxy):
        """Test an explicit budget stops the transfer part way."""
        humans, kzinti = galaxy.species
        humans.tech_level[Tech.GV] = 3
        t = tech_transfer(Tech.GV, 6, budget=20)

        apply_tech_transfers(galaxy, humans, [t], EventLog())

        assert humans.tech_level[Tech.GV] == 5
        assert kzinti.econ_units == 500 - 19

    def test_other_recipients_ignored(self, galaxy):
        """Test a transfer to another species is left alone."""
        humans, kzinti = galaxy.species
        t = tech_transfer(Tech.GV, 6)
        t.recipient = 2

        apply_tech_transfers(galaxy, humans, [t], EventLog())

        assert humans.tech_level[Tech.GV] == 3
        assert t.number_1 == 0

    def test_unknown_tech(self, galaxy):
        """Test a transfer of an unknown tech is a configuration error."""
        humans = galaxy.species[0]
        t = tech_transfer(Tech.GV, 6)
        t.value = 9
        with pytest.raises(ConfigurationError):
            apply_tech_transfers(galaxy, humans, [t], EventLog())

    def test_donor_report(self, galaxy):
        """Test the donor is told the outcome of each transfer."""
        humans, kzinti = galaxy.species
        humans.tech_level[Tech.ML] = 12
        failed = tech_transfer(Tech.ML, 10)
        funded = tech_transfer(Tech.GV, 6)
        apply_tech_transfers(galaxy, humans, [failed, funded], EventLog())

        log = EventLog()
        report_transfers_to_donor(kzinti, [failed, funded], log)

        assert log.text() == (
            "  Military tech transfer to SP Humans failed.\n"
            "  Gravitics tech transfer to SP Humans raised their tech level from 3 to 6 at a cost to you of 38.\n"
        )


class TestKnowledgeTransfer:
    """Test knowledge transfers."""

    def test_raises_knowledge_not_level(self, galaxy):
        """Test knowledge rises but the usable level does not."""
        humans = galaxy.species[0]
        t = Transaction(
            type=TransactionType.KNOWLEDGE_TRANSFER, donor=2, recipient=1, value=Tech.BI, name_1="Kzinti", number_3=8
        )
        log = EventLog()

        apply_knowledge_transfers(humans, [t], log)

        assert humans.tech_knowledge[Tech.BI] == 8
        assert humans.tech_level[Tech.BI] == 3
        assert "transferred knowledge of Biology to you up to tech level 8" in log.text()

    def test_known_level_ignored(self, galaxy):
        """Test an offer no better than current knowledge does nothing."""
        humans = galaxy.species[0]
        humans.tech_knowledge[Tech.BI] = 9
        t = Transaction(
            type=TransactionType.KNOWLEDGE_TRANSFER, donor=2, recipient=1, value=Tech.BI, name_1="Kzinti", number_3=8
        )
        log = EventLog()

        apply_knowledge_transfers(humans, [t], log)

        assert humans.tech_knowledge[Tech.BI] == 9
        assert log.text() == ""


class TestTechGrowth:
    """Test natural tech growth."""

    def test_zero_level_without_experience(self):
        """Test a tech at 0 with no experience never grows."""
        rng = GameRNG(1)
        for _ in range(100):
            assert grow_tech_level(rng, 0, 0) == (0, 0)

    def test_never_falls(self):
        """Test growth never lowers a level."""
        rng = GameRNG(2)
        for level in range(1, 40):
            new_level, _ = grow_tech_level(rng, level, level * level)
            assert new_level >= level

    def test_runaway_growth_capped(self):
        """Test a tech above 50 rises at most one level past what its points buy."""
        # 60 * 60 + 61 * 61 points buy two levels
        for seed in range(20):
            new_level, _ = grow_tech_level(GameRNG(seed), 60, 60 * 60 + 61 * 61)
            assert 61 <= new_level <= 63


class TestHighTech:
    """Test new-technology notices."""

    def test_interspecies_construction_notice(self, galaxy):
        """Test reaching manufacturing 25 announces interspecies construction."""
        humans = galaxy.species[0]
        humans.init_tech_level[Tech.MA] = 24
        humans.tech_level[Tech.MA] = 25
        log = EventLog()

        announce_high_tech(humans, log)

        assert "You now have the technology to do interspecies construction." in log.text()
        assert humans.init_tech_level[Tech.MA] == 25

    def test_nothing_new(self, galaxy):
        """Test no notice when no tech rose."""
        log = EventLog()
        announce_high_tech(galaxy.species[0], log)
        assert log.text() == ""
