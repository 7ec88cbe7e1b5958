#!/usr/bin/env python3
"""
Unit tests for the JSON-RPC client, hashing helpers and GMX data loading.

Run with: python3 -m pytest puppetgen/test_chain.py
"""

import json
import tempfile
import unittest
from pathlib import Path

import httpx
from eth_abi import encode

from puppetgen.chain import (
    RpcClient,
    RpcError,
    decode_result,
    encode_call,
    fetch_markets,
    load_gmx_deployments,
    select_gmx_contracts,
    to_checksum_address,
)
from puppetgen.chain.gmx import MARKET_TUPLE
from puppetgen.diagnostics import GeneratorDiagnostics


ZERO = '0x0000000000000000000000000000000000000000'


def rpc_transport(results, requests=None):
    """MockTransport answering JSON-RPC calls from a method -> result table."""
    def handler(request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        if requests is not None:
            requests.append(payload)
        result = results[payload['method']]
        if isinstance(result, dict) and 'error' in result:
            return httpx.Response(200, json={'jsonrpc': '2.0', 'id': payload['id'], 'error': result['error']})
        return httpx.Response(200, json={'jsonrpc': '2.0', 'id': payload['id'], 'result': result})
    return httpx.MockTransport(handler)


class TestHashing(unittest.TestCase):
    """Test Keccak based helpers."""

    def test_checksum_address(self):
        self.assertEqual(
            to_checksum_address('0x5aaeb6053f3e94c9b9a09f33669435e7ef1beaed'),
            '0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed',
        )
        self.assertEqual(
            to_checksum_address('0xFB6916095CA1DF60BB79CE92CE3EA74C37C5D359'),
            '0xfB6916095ca1df60bB79Ce92cE3Ea74c37c5d359',
        )

    def test_invalid_address(self):
        with self.assertRaises(ValueError):
            to_checksum_address('0x1234')

    def test_encode_call_selector(self):
        data = encode_call('transfer', ['address', 'uint256'], [ZERO, 1])
        self.assertTrue(data.startswith('0xa9059cbb'))
        self.assertEqual(len(data), 2 + 8 + 64 * 2)

    def test_decode_empty_result(self):
        with self.assertRaises(RpcError):
            decode_result(['uint256'], '0x')


class TestRpcClient(unittest.TestCase):
    """Test JSON-RPC calls over a mocked transport."""

    def test_chain_id(self):
        requests = []
        client = RpcClient('http://rpc.test', transport=rpc_transport({'eth_chainId': '0xa4b1'}, requests))
        self.assertEqual(client.chain_id(), 42161)
        self.assertEqual(requests[0]['method'], 'eth_chainId')
        self.assertEqual(requests[0]['params'], [])

    def test_rpc_error_member(self):
        transport = rpc_transport({'eth_chainId': {'error': {'code': -32000, 'message': 'boom'}}})
        client = RpcClient('http://rpc.test', transport=transport)
        with self.assertRaises(RpcError):
            client.chain_id()

    def test_http_error(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(502, text='bad gateway'))
        with self.assertRaises(RpcError):
            RpcClient('http://rpc.test', transport=transport).call('eth_chainId')

    def test_invalid_json(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, text='not json'))
        with self.assertRaises(RpcError):
            RpcClient('http://rpc.test', transport=transport).call('eth_chainId')

    def test_eth_call_payload(self):
        requests = []
        client = RpcClient('http://rpc.test', transport=rpc_transport({'eth_call': '0x'}, requests))
        client.eth_call(ZERO, '0x1234')
        self.assertEqual(requests[0]['params'], [{'to': ZERO, 'data': '0x1234'}, 'latest'])


class TestGmxMarkets(unittest.TestCase):
    """Test the Reader.getMarkets query."""

    def test_fetch_markets(self):
        perp = (
            '0x70d95587d40a2caf56bd97485ab3eec10bee6336',
            '0x82af49447d8a07e3bd95bd0d56f35241523fbab1',
            '0x82af49447d8a07e3bd95bd0d56f35241523fbab1',
            '0xaf88d065e77c8cc2239327c5edb3a432268e5831',
        )
        swap = (
            '0xb686bcb112660343e6d15bdb65297e110c8311c4',
            ZERO,
            '0xaf88d065e77c8cc2239327c5edb3a432268e5831',
            '0xfd086bc7cd5c481dcc9c85ebe478a1c0b69fcbb9',
        )
        response = '0x' + encode([MARKET_TUPLE], [[perp, swap]]).hex()
        requests = []
        client = RpcClient('http://rpc.test', transport=rpc_transport({'eth_call': response}, requests))

        markets = fetch_markets(client, '0x' + '11' * 20, '0x' + '22' * 20)

        self.assertEqual(len(markets), 2)
        self.assertEqual(markets[0].market_token, to_checksum_address(perp[0]))
        self.assertEqual(markets[0].market_type, 'PERP')
        self.assertEqual(markets[1].index_token, ZERO)
        self.assertEqual(markets[1].market_type, 'SWAP')
        self.assertEqual(requests[0]['params'][0]['to'], '0x' + '11' * 20)
        self.assertTrue(requests[0]['params'][0]['data'].startswith(
            encode_call('getMarkets', ['address', 'uint256', 'uint256'], ['0x' + '22' * 20, 0, 200])
        ))


class TestGmxDeployments(unittest.TestCase):
    """Test loading GMX deployment files."""

    def _write_deployment(self, root: Path, name: str, data: dict) -> None:
        path = root / 'deployments' / 'arbitrum' / f'{name}.json'
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data))

    def test_metadata_files_are_skipped(self):
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            self._write_deployment(root, 'Reader', {'address': '0x' + '11' * 20, 'abi': []})
            self._write_deployment(root, 'solcInputs-metadata', {'x': 1})
            deployments = load_gmx_deployments(root)

        self.assertEqual(list(deployments), ['Reader'])

    def test_missing_directory(self):
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(FileNotFoundError):
                load_gmx_deployments(Path(tmp))

    def test_select_contracts(self):
        deployments = {
            'Reader': {'address': '0x' + '11' * 20, 'abi': [{'type': 'function', 'name': 'getMarkets'}]},
            'DataStore': {'address': '0x' + '22' * 20, 'abi': []},
            'OrderVault': {'abi': []},
        }
        diagnostics = GeneratorDiagnostics()
        contracts = select_gmx_contracts(deployments, diagnostics)

        self.assertEqual([c.name for c in contracts], ['GmxReaderV2', 'GmxDatastore'])
        categories = [d.category for d in diagnostics.warnings]
        self.assertEqual(categories.count('missing-deployment'), 3)

    def test_select_none_fails(self):
        with self.assertRaises(ValueError):
            select_gmx_contracts({})


if __name__ == '__main__':
    unittest.main()
