#!/usr/bin/env python3
"""
Unit tests for _logEvent signature inference and the events module.

Run with: python3 -m pytest puppetgen/test_events.py
"""

import tempfile
import unittest
from pathlib import Path

from puppetgen.chain.rpc import keccak256_hex
from puppetgen.codegen.abi_params import AbiParameterError, parse_abi_parameters
from puppetgen.codegen.events import event_hash, generate_event_params_code
from puppetgen.events import EventDefinition, EventExtractor, EventParam, parse_events_from_solidity
from puppetgen.scanner import StructDefinition, StructField
from puppetgen.type_system import (
    StructRegistry,
    TypeScope,
    convert_solidity_type_to_abi,
    extract_param_name,
    extract_variable_name,
    unique_name,
)


POSITION = StructDefinition('Position', [
    StructField('address', 'trader'),
    StructField('uint256', 'size'),
])


class TestTypeConversion(unittest.TestCase):
    """Test Solidity to ABI type conversion."""

    def test_elementary_types(self):
        self.assertEqual(convert_solidity_type_to_abi('uint', {}), 'uint256')
        self.assertEqual(convert_solidity_type_to_abi('int[]', {}), 'int256[]')
        self.assertEqual(convert_solidity_type_to_abi('bytes32', {}), 'bytes32')

    def test_interfaces_are_addresses(self):
        self.assertEqual(convert_solidity_type_to_abi('IERC20', {}), 'address')
        self.assertEqual(convert_solidity_type_to_abi('IVault[]', {}), 'address[]')

    def test_struct_becomes_tuple(self):
        structs = {'Position': POSITION}
        self.assertEqual(convert_solidity_type_to_abi('Position', structs), '(address, uint256)')
        self.assertEqual(convert_solidity_type_to_abi('Position[]', structs), '(address, uint256)[]')

    def test_contract_suffixes_are_addresses(self):
        self.assertEqual(convert_solidity_type_to_abi('TokenRouter', {}), 'address')
        self.assertEqual(convert_solidity_type_to_abi('AllocationStore', {}), 'address')

    def test_unmapped_types_pass_through(self):
        self.assertEqual(convert_solidity_type_to_abi('OrderType', {}), 'OrderType')
        # 'Index' is not an interface name: second letter is lowercase
        self.assertEqual(convert_solidity_type_to_abi('Index', {}), 'Index')


class TestStructRegistry(unittest.TestCase):
    """Test cross-file struct discovery."""

    def test_discover_from_files(self):
        with tempfile.TemporaryDirectory() as tmp:
            first = Path(tmp) / 'A.sol'
            second = Path(tmp) / 'B.sol'
            first.write_text('struct Position { address trader; }\nstruct Fee { uint256 amount; }')
            second.write_text('struct Position { address trader; uint256 size; }')
            registry = StructRegistry()
            registry.discover_from_files([first, second])

        self.assertEqual(len(registry), 2)
        self.assertIn('Fee', registry)
        self.assertEqual(registry.get('Position').field_type('size'), 'uint256')
        self.assertIsNone(registry.get('Missing'))


class TestTypeScope(unittest.TestCase):
    """Test the scope chain used to resolve argument types."""

    def setUp(self):
        self.scope = TypeScope(
            structs={'Position': POSITION},
            function_params={'amount': 'uint256', 'position': 'Position', 'token': 'IERC20'},
            local_vars={'amount': 'uint8', 'fee': 'uint128', 'user': 'address'},
        )

    def test_special_vars(self):
        self.assertEqual(self.scope.resolve('msg.sender'), 'address')
        self.assertEqual(self.scope.resolve('block.timestamp'), 'uint256')

    def test_literals(self):
        self.assertEqual(self.scope.resolve('42'), 'uint256')
        self.assertEqual(self.scope.resolve('true'), 'bool')
        self.assertEqual(self.scope.resolve('0x' + 'ab' * 32), 'bytes32')
        self.assertEqual(self.scope.resolve('address(0)'), 'address')

    def test_struct_member(self):
        self.assertEqual(self.scope.resolve('position.trader'), 'address')
        self.assertEqual(self.scope.resolve('position.size'), 'uint256')

    def test_params_take_precedence_over_locals(self):
        self.assertEqual(self.scope.resolve('amount'), 'uint256')

    def test_locals(self):
        self.assertEqual(self.scope.resolve('fee'), 'uint128')

    def test_underscore_prefix_is_stripped(self):
        self.assertEqual(self.scope.resolve('_user'), 'address')

    def test_interface_param(self):
        self.assertEqual(self.scope.resolve('token'), 'address')

    def test_unresolved(self):
        self.assertEqual(self.scope.resolve('mystery'), 'unknown')
        self.assertEqual(self.scope.resolve('position.missing'), 'unknown')
        self.assertEqual(self.scope.resolve('getAmount(x)'), 'unknown')


class TestParamNames(unittest.TestCase):
    """Test argument expression to parameter name derivation."""

    def test_variable_name_extraction(self):
        self.assertEqual(extract_variable_name('position.size'), 'position.size')
        self.assertEqual(extract_variable_name('users[0]'), 'users')
        self.assertEqual(extract_variable_name('balances[msg.sender]'), 'balances')
        self.assertEqual(extract_variable_name('amount'), 'amount')

    def test_param_names(self):
        self.assertEqual(extract_param_name('position.size'), 'size')
        self.assertEqual(extract_param_name('msg.sender'), 'sender')
        self.assertEqual(extract_param_name('balances[user]'), 'balances')
        self.assertEqual(extract_param_name('_amount'), 'amount')
        self.assertEqual(extract_param_name('bytes32(0)'), 'data')
        self.assertEqual(extract_param_name('address(0)'), 'addr')
        self.assertEqual(extract_param_name('a + b'), 'param')

    def test_keyword_and_digit_names(self):
        self.assertEqual(extract_param_name('true'), 'trueValue')
        self.assertEqual(extract_param_name('100'), 'param100')

    def test_unique_names(self):
        used = set()
        self.assertEqual(unique_name('amount', used), 'amount')
        self.assertEqual(unique_name('amount', used), 'amount2')
        self.assertEqual(unique_name('amount', used), 'amount3')
        self.assertEqual(unique_name('user', used), 'user')


class TestEventExtractor(unittest.TestCase):
    """Test end-to-end inference over inline Solidity."""

    SOURCE = '''
    // SPDX-License-Identifier: MIT
    pragma solidity ^0.8.29;

    contract Allocate is CoreContract {
        mapping(address => uint256) public balances;

        struct Settlement {
            address trader;
            uint256 amount;
        }

        function deposit(IERC20 _token, uint256 _amount) external {
            uint256 fee = _amount / 100;
            _logEvent("Deposit", abi.encode(_token, msg.sender, _amount, fee));
        }

        function settle(Settlement calldata settlement) external {
            _logEvent("Settle", abi.encode(settlement.trader, settlement.amount, balances[msg.sender]));
        }

        function sync(bytes32 key) external {
            _logEvent("Sync", abi.encode(key, computeSomething(key)));
            _logEvent("Sync", abi.encode(key, block.timestamp));
        }

        function ping() external {
            _logEvent("Ping", abi.encode());
        }
    }
    '''

    def setUp(self):
        registry = StructRegistry()
        registry.discover_from_source(self.SOURCE)
        self.extractor = EventExtractor(registry)
        self.events = self.extractor.parse_source(self.SOURCE, 'Allocate.sol')['Allocate']

    def _event(self, name):
        return next(e for e in self.events if e.name == name)

    def test_events_in_discovery_order(self):
        self.assertEqual([e.name for e in self.events], ['Deposit', 'Settle', 'Sync', 'Ping'])

    def test_param_and_local_types(self):
        deposit = self._event('Deposit')
        self.assertEqual(
            [(p.type, p.name) for p in deposit.params],
            [('address', 'token'), ('address', 'sender'), ('uint256', 'amount'), ('uint256', 'fee')],
        )
        self.assertEqual(deposit.contract_name, 'Allocate')
        self.assertEqual(deposit.source_file, 'Allocate.sol')

    def test_struct_fields_and_mappings(self):
        settle = self._event('Settle')
        self.assertEqual(
            [(p.type, p.name) for p in settle.params],
            [('address', 'trader'), ('uint256', 'amount'), ('uint256', 'balances')],
        )

    def test_duplicate_keeps_fewer_unknowns(self):
        syncs = [e for e in self.events if e.name == 'Sync']
        self.assertEqual(len(syncs), 1)
        self.assertEqual([p.type for p in syncs[0].params], ['bytes32', 'uint256'])
        self.assertEqual(syncs[0].unknown_count, 0)

    def test_empty_event(self):
        self.assertEqual(self._event('Ping').params, [])

    def test_duplicate_with_equal_unknowns_keeps_first(self):
        events = {}
        first = EventDefinition('X', [EventParam('unknown', 'a')], contract_name='C', line=1)
        second = EventDefinition('X', [EventParam('unknown', 'b')], contract_name='C', line=2)
        EventExtractor._add_event(events, first)
        EventExtractor._add_event(events, second)
        self.assertIs(events['C'][0], first)

    def test_file_without_contract_is_skipped(self):
        source = 'library Lib {\n function f() internal { _logEvent("X", abi.encode(a)); }\n}'
        self.assertEqual(self.extractor.parse_source(source), {})

    def test_parse_directory_discovers_structs_across_files(self):
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / 'shared').mkdir()
            (root / 'shared' / 'Types.sol').write_text(
                'struct Leg {\n    address market;\n    uint256 size;\n}\n'
            )
            (root / 'Router.sol').write_text(
                'contract Router {\n'
                '    function open(Leg memory leg) external {\n'
                '        _logEvent("Open", abi.encode(leg, leg.market));\n'
                '    }\n'
                '}\n'
            )
            contract_events = parse_events_from_solidity(root)

        event = contract_events['Router'][0]
        self.assertEqual(
            [(p.type, p.name) for p in event.params],
            [('(address, uint256)', 'leg'), ('address', 'market')],
        )

    def test_signature(self):
        self.assertEqual(self._event('Deposit').signature(),
                         'address token, address sender, uint256 amount, uint256 fee')


class TestAbiParameters(unittest.TestCase):
    """Test human-readable parameter parsing."""

    def test_plain_params(self):
        self.assertEqual(parse_abi_parameters('address user, uint256 amount'), [
            {'type': 'address', 'name': 'user'},
            {'type': 'uint256', 'name': 'amount'},
        ])

    def test_empty(self):
        self.assertEqual(parse_abi_parameters(''), [])

    def test_tuple_array(self):
        self.assertEqual(parse_abi_parameters('(address, uint256)[] legs'), [{
            'type': 'tuple[]',
            'name': 'legs',
            'components': [{'type': 'address'}, {'type': 'uint256'}],
        }])

    def test_unknown_passes_through(self):
        self.assertEqual(parse_abi_parameters('unknown value'), [{'type': 'unknown', 'name': 'value'}])

    def test_unbalanced(self):
        with self.assertRaises(AbiParameterError):
            parse_abi_parameters('(address, uint256 legs')


class TestEventCodegen(unittest.TestCase):
    """Test the CONTRACT_EVENT_MAP module."""

    def test_event_hash_is_keccak_of_name(self):
        self.assertEqual(
            keccak256_hex(''),
            '0xc5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470',
        )
        self.assertEqual(event_hash('Deposit'), keccak256_hex('Deposit'))
        self.assertEqual(len(event_hash('Deposit')), 66)

    def test_module_layout(self):
        contract_events = {
            'TokenRouter': [EventDefinition('Transfer', [EventParam('address', 'to')], 'TokenRouter')],
            'Allocate': [
                EventDefinition('settle', [EventParam('uint256', 'amount')], 'Allocate'),
                EventDefinition('Deposit', [EventParam('address', 'user'), EventParam('unknown', 'x')],
                                'Allocate'),
            ],
        }
        code = generate_event_params_code(contract_events)

        self.assertTrue(code.startswith('// This file is auto-generated from Solidity source files.'))
        self.assertIn('export const CONTRACT_EVENT_MAP = {', code)
        self.assertTrue(code.endswith('} as const\n'))
        self.assertLess(code.index('Allocate:'), code.index('TokenRouter:'))
        self.assertLess(code.index('Deposit:'), code.index('settle:'))
        self.assertIn(f"      hash: '{event_hash('Deposit')}',", code)
        self.assertIn('      args: [{type:"address",name:"user"},{type:"unknown",name:"x"}]', code)

    def test_empty_event_args(self):
        code = generate_event_params_code({'A': [EventDefinition('Ping', [], 'A')]})
        self.assertIn('      args: []', code)

    def test_contract_name_map(self):
        code = generate_event_params_code(
            {'Allocate': [EventDefinition('Ping', [], 'Allocate')]},
            {'Allocate': 'Allocation'},
        )
        self.assertIn('  Allocation: {', code)
        self.assertNotIn('  Allocate: {', code)

    def test_output_is_deterministic(self):
        contract_events = {
            'B': [EventDefinition('Y', [], 'B')],
            'A': [EventDefinition('X', [EventParam('bool', 'ok')], 'A')],
        }
        reordered = dict(reversed(list(contract_events.items())))
        self.assertEqual(generate_event_params_code(contract_events), generate_event_params_code(reordered))


if __name__ == '__main__':
    unittest.main()
