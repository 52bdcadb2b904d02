#!/usr/bin/env python3
"""
Quick start guide for the shielded bond core.

Run this to see issuance, a private trade and a redemption witness.
Proving is skipped unless ZKBOND_CIRCUIT_DIR points at a compiled circuit.
"""

import logging
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from zkbond import ShieldedKeyHierarchy, Note, ShieldedPool
from zkbond.config import configure_logging, get_settings
from zkbond.core.bond import RedemptionInputs, check_tradable, days_until_maturity
from zkbond.exceptions import ProvingFailed
from zkbond.prover import NargoProver, witness_to_prover_toml
from zkbond.utils.field import field_to_hex

MATURITY = 1893456000  # 2030-01-01


def main():
    """Run a simple example of the shielded bond flow."""
    logging.basicConfig(format="%(levelname)s %(name)s: %(message)s")
    configure_logging()

    print("=" * 70)
    print("SHIELDED BOND QUICK START EXAMPLE")
    print("=" * 70)
    print()

    # Step 1: Identities
    print("Step 1: Derive Alice's and Bob's keys")
    print("-" * 70)
    alice = ShieldedKeyHierarchy.generate()
    bob = ShieldedKeyHierarchy.generate()
    print(f"✓ Alice spending public: {field_to_hex(alice.spending_public)[:18]}...")
    print(f"✓ Bob spending public:   {field_to_hex(bob.spending_public)[:18]}...")
    print(f"✓ Shared viewing secret agrees: {alice.agree(bob.viewing_public) == bob.agree(alice.viewing_public)}")
    print()

    # Step 2: Issuance
    print("Step 2: Issue a 1000-unit bond to Alice")
    print("-" * 70)
    pool = ShieldedPool()
    bond = Note.create(1000, alice.spending_public, maturity_date=MATURITY)
    index = pool.register(bond)
    print(f"✓ Bond registered at leaf {index}, {days_until_maturity(bond)} days to maturity")
    print()

    # Step 3: Private trade
    print("Step 3: Alice sells 600 to Bob, keeps 400 change")
    print("-" * 70)
    check_tradable(bond)
    to_bob = Note.create(600, bob.spending_public, maturity_date=MATURITY)
    change = Note.create(400, alice.spending_public, maturity_date=MATURITY)
    witness = pool.join_split(alice, bond, [to_bob, change])
    for name, value in witness.to_dict().items():
        print(f"  {name}: {value}")
    print()

    # Step 4: Prover inputs
    print("Step 4: Prover inputs")
    print("-" * 70)
    toml = witness_to_prover_toml(witness)
    print(f"✓ Prover.toml has {len(toml.splitlines())} records")
    settings = get_settings()
    if settings.circuit_dir.is_dir():
        try:
            artifact = NargoProver(settings).prove(witness)
            print(f"✓ Proof: {artifact.hex()[:34]}...")
        except ProvingFailed as e:
            print(f"✗ Proving failed: {e}")
    else:
        print(f"  (no circuit at {settings.circuit_dir}, skipping proof)")
    print()

    # Step 5: Redemption
    print("Step 5: Bob redeems at maturity")
    print("-" * 70)
    pool.register(to_bob)
    pool.register(change)
    redeem = pool.join_split(
        bob,
        to_bob,
        [
            Note.create(0, bob.spending_public, maturity_date=MATURITY),
            Note.create(600, bob.spending_public, maturity_date=MATURITY),
        ],
    )
    burn = RedemptionInputs.from_witness(redeem, now=MATURITY)
    print(f"✓ Burn nullifier: {field_to_hex(burn.nullifier)[:18]}...")
    print(f"✓ Pool now holds {pool.snapshot().num_commitments} commitments")
    print()


if __name__ == "__main__":
    main()
