import dataclasses

import pytest

from nft_swap.assets import AssetType
from nft_swap.exceptions import InvalidSignatureError, OrderSigningError
from nft_swap.order_utils import (
    DEFAULT_APP_ID,
    SIGNATURE_TYPE_EIP712,
    build_typed_data,
    generate_order_nonce,
    recover_signer,
    sign_order,
    verify_order_signature,
)

from tests.common import (
    EXCHANGE_PROXY_ADDRESS,
    MAKER_ADDRESS,
    MAKER_PRIVATE_KEY,
    POLYGON_CHAIN_ID,
    TAKER_ADDRESS,
    TAKER_PRIVATE_KEY,
    make_order,
)


def test_nonce_carries_app_id():
    nonce = generate_order_nonce()
    assert nonce >> 128 == DEFAULT_APP_ID
    assert nonce != generate_order_nonce()


def test_erc721_typed_data():
    domain, types, message = build_typed_data(make_order(), POLYGON_CHAIN_ID, EXCHANGE_PROXY_ADDRESS)

    assert domain == {
        "name": "ZeroEx",
        "version": "1.0.0",
        "chainId": 137,
        "verifyingContract": EXCHANGE_PROXY_ADDRESS,
    }
    assert set(types) == {"ERC721Order", "Fee", "Property"}
    assert [f["name"] for f in types["ERC721Order"]] == list(message)
    assert message["erc721TokenId"] == 10
    assert message["fees"] == []


def test_erc1155_typed_data_has_amount_last():
    _, types, message = build_typed_data(make_order(AssetType.ERC1155), POLYGON_CHAIN_ID, EXCHANGE_PROXY_ADDRESS)

    assert "ERC1155Order" in types
    assert types["ERC1155Order"][-1] == {"name": "erc1155TokenAmount", "type": "uint128"}
    assert list(message)[-1] == "erc1155TokenAmount"
    assert message["erc1155TokenAmount"] == 5


@pytest.mark.parametrize("nft_type", [AssetType.ERC721, AssetType.ERC1155])
def test_signed_order_recovers_to_maker(nft_type):
    signed = sign_order(MAKER_PRIVATE_KEY, make_order(nft_type), POLYGON_CHAIN_ID, EXCHANGE_PROXY_ADDRESS)

    assert signed.signature.signature_type == SIGNATURE_TYPE_EIP712
    assert signed.signature.v in (27, 28)
    assert len(signed.signature.r) == 32 and len(signed.signature.s) == 32
    assert recover_signer(signed) == MAKER_ADDRESS
    verify_order_signature(signed)


def test_tampered_order_fails_verification():
    signed = sign_order(MAKER_PRIVATE_KEY, make_order(), POLYGON_CHAIN_ID, EXCHANGE_PROXY_ADDRESS)
    tampered = dataclasses.replace(signed, order=dataclasses.replace(signed.order, erc20_token_amount=1))

    with pytest.raises(InvalidSignatureError) as exc_info:
        verify_order_signature(tampered)
    assert exc_info.value.expected_signer == MAKER_ADDRESS


def test_order_signed_by_someone_else_fails_verification():
    signed = sign_order(TAKER_PRIVATE_KEY, make_order(), POLYGON_CHAIN_ID, EXCHANGE_PROXY_ADDRESS)

    with pytest.raises(InvalidSignatureError) as exc_info:
        verify_order_signature(signed)
    assert exc_info.value.recovered_signer == TAKER_ADDRESS


def test_signing_error_hides_key():
    bad_key = '0x' + '00' * 32

    with pytest.raises(OrderSigningError) as exc_info:
        sign_order(bad_key, make_order(), POLYGON_CHAIN_ID, EXCHANGE_PROXY_ADDRESS)
    assert bad_key not in str(exc_info.value)


def test_signed_order_to_dict_is_json_friendly():
    signed = sign_order(MAKER_PRIVATE_KEY, make_order(), POLYGON_CHAIN_ID, EXCHANGE_PROXY_ADDRESS)
    payload = signed.to_dict()

    assert payload["direction"] == 0
    assert payload["nonce"] == "12345"
    assert payload["erc20TokenAmount"] == "1000000"
    assert payload["nftType"] == "ERC721"
    assert payload["chainId"] == 137
    assert payload["signature"]["r"].startswith("0x")
    assert payload["signature"]["signatureType"] == 2
