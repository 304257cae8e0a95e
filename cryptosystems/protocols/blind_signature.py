"""
RSA Blind Signature Protocol.

Two roles:
1. BlindSignatureRequester hides a message with a random blinding factor,
   sends the blinded value to the signer and unblinds the reply
2. BlindSigner signs whatever blinded value it receives without learning
   the underlying message

The unblinded result is an ordinary RSA signature on the original message,
verifiable with the signer's public key.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from ..crypto.errors import InvalidParameterError
from ..crypto.rsa import RSAPrivateKey, RSAPublicKey

logger = logging.getLogger(__name__)


@dataclass
class BlindingSession:
    """State kept by the requester between blinding and unblinding."""
    message: int
    blinding_factor: int
    blinded_message: int
    signature: Optional[int] = None


class BlindSigner:
    """
    Signer side of the protocol.

    Holds the private key and signs blinded values on request.
    """

    def __init__(self, private_key: RSAPrivateKey):
        self.private_key = private_key
        self.signatures_issued = 0

    @property
    def public_key(self) -> RSAPublicKey:
        return self.private_key.pub_key

    def sign_blinded(self, blinded_message: int) -> int:
        """
        Sign a blinded message.

        Args:
            blinded_message: Value produced by BlindSignatureRequester.blind

        Returns:
            Blind signature sigma' = blinded^d mod n
        """
        if not 0 <= blinded_message < self.public_key.n:
            raise InvalidParameterError("Blinded message must lie in [0, n)")
        self.signatures_issued += 1
        logger.debug(f"Issued blind signature #{self.signatures_issued}")
        return self.private_key.sign(blinded_message)


class BlindSignatureRequester:
    """
    Requester side of the protocol.

    Only knows the signer's public key.
    """

    def __init__(self, signer_public_key: RSAPublicKey):
        self.signer_public_key = signer_public_key

    def blind(self, message: int, blinding_factor: Optional[int] = None) -> BlindingSession:
        """
        Blind a message for the signer.

        Args:
            message: Message (or hash) in [0, n)
            blinding_factor: r coprime to n (drawn at random if not provided)

        Returns:
            BlindingSession holding r and the blinded message
        """
        pub = self.signer_public_key
        if not 0 <= message < pub.n:
            raise InvalidParameterError("Message must lie in [0, n)")

        if blinding_factor is None:
            blinding_factor = pub.random_blinding_factor()

        blinded = pub.blind(blinding_factor, message)
        return BlindingSession(message, blinding_factor, blinded)

    def unblind(self, session: BlindingSession, blind_signature: int) -> int:
        """
        Recover the signature on the original message.

        Raises:
            InvalidParameterError: if the unblinded signature does not verify
        """
        pub = self.signer_public_key
        signature = pub.unblind(session.blinding_factor, blind_signature)
        if pub.verify(signature) != session.message:
            raise InvalidParameterError("Unblinded signature does not verify against the message")
        session.signature = signature
        return signature

    def request_signature(self, signer: BlindSigner, message: int) -> int:
        """Run the full blind / sign / unblind exchange with a signer."""
        session = self.blind(message)
        blind_signature = signer.sign_blinded(session.blinded_message)
        return self.unblind(session, blind_signature)


if __name__ == '__main__':
    from ..crypto.rsa import generate_rsa_keys

    print("Testing Blind Signature Protocol...")

    signer = BlindSigner(generate_rsa_keys(256))
    requester = BlindSignatureRequester(signer.public_key)

    message = 2
    signature = requester.request_signature(signer, message)
    assert signature == signer.private_key.sign(message), "Blind signature mismatch"
    assert signer.public_key.verify(signature) == message, "Verification failed"

    print("\nAll tests passed!")
