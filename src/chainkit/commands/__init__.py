"""
Commands - CLI command implementations.

Each module contributes top-level commands or groups:
- account:   signer identity (account) and native transfers (send)
- check:     inspect an address for contract code
- counter:   deploy and drive the Counter contract
- token:     ERC-20 deployment and operations
- fee_token: ERC-20 with a native-currency transfer fee
- verify:    bytecode comparison and explorer verification status
- smoke:     end-to-end network smoke test
"""
