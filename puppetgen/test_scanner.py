#!/usr/bin/env python3
"""
Unit tests for the Solidity text scanners.

Run with: python3 -m pytest puppetgen/test_scanner.py
"""

import tempfile
import unittest
from pathlib import Path

from puppetgen.scanner import (
    extract_contract_name,
    extract_log_event_calls,
    get_all_sol_files,
    get_function_containing,
    locale_sort_key,
    parse_error_definitions,
    parse_function_signatures,
    parse_gmx_error_definitions,
    parse_local_variables,
    parse_mapping_declarations,
    parse_structs,
    split_encode_args,
    strip_comments,
)


class TestSourceFiles(unittest.TestCase):
    """Test source discovery and contract names."""

    def test_interface_and_test_directories_are_skipped(self):
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            for rel in ['b/Zeta.sol', 'a/Alpha.sol', 'interface/IAlpha.sol', 'test/Alpha.t.sol', 'a/notes.md']:
                path = root / rel
                path.parent.mkdir(parents=True, exist_ok=True)
                path.write_text('// x\n')

            names = [p.name for p in get_all_sol_files(root)]

        self.assertEqual(names, ['Alpha.sol', 'Zeta.sol'])

    def test_contract_name_with_inheritance(self):
        self.assertEqual(extract_contract_name('contract Allocate is CoreContract {'), 'Allocate')

    def test_contract_name_without_inheritance(self):
        self.assertEqual(extract_contract_name('abstract contract Base{\n}'), 'Base')

    def test_library_has_no_contract_name(self):
        self.assertIsNone(extract_contract_name('library Math {\n}'))

    def test_strip_comments(self):
        text = 'a, /* block\n comment */ b // trailing\n'
        self.assertEqual(strip_comments(text).split(), ['a,', 'b'])


class TestFunctionSpan(unittest.TestCase):
    """Test brace-counted function spans."""

    SOURCE = '\n'.join([
        'contract Vault {',                          # 1
        '    uint256 total;',                        # 2
        '    function deposit(uint256 amount) external {',  # 3
        '        uint256 fee = amount / 100;',       # 4
        '    }',                                     # 5
        '    function withdraw() external {',        # 6
        '        address owner = msg.sender;',       # 7
        '    }',                                     # 8
        '}',                                         # 9
    ])

    def test_span_starts_at_first_function_line(self):
        span = get_function_containing(self.SOURCE, 4)
        self.assertIsNotNone(span)
        self.assertTrue(span.startswith('    function deposit'))

    def test_span_runs_to_contract_close(self):
        span = get_function_containing(self.SOURCE, 7)
        self.assertIn('address owner = msg.sender;', span)
        self.assertIn('uint256 fee = amount / 100;', span)
        self.assertTrue(span.endswith('}'))

    def test_line_before_any_function(self):
        self.assertIsNone(get_function_containing(self.SOURCE, 2))

    def test_function_header_line_is_inside_span(self):
        self.assertIsNotNone(get_function_containing(self.SOURCE, 3))


class TestLogEventCalls(unittest.TestCase):
    """Test _logEvent call extraction."""

    def test_single_line_call(self):
        source = 'contract A {\n  function f() {\n    _logEvent("Deposit", abi.encode(user, amount));\n  }\n}'
        calls = extract_log_event_calls(source)
        self.assertEqual(len(calls), 1)
        self.assertEqual(calls[0].event_name, 'Deposit')
        self.assertEqual(calls[0].encode_args, 'user, amount')
        self.assertEqual(calls[0].line_number, 3)

    def test_multiline_call_with_comments_and_nested_parens(self):
        source = (
            'contract A {\r\n'
            '  function f() {\r\n'
            '    _logEvent(\r\n'
            '      "Settle",\r\n'
            '      abi.encode(\r\n'
            '        address(token), // the token\r\n'
            '        balances[user],\r\n'
            '        /* total */ getAmount(x, y)\r\n'
            '      )\r\n'
            '    );\r\n'
            '  }\r\n'
            '}\r\n'
        )
        calls = extract_log_event_calls(source)
        self.assertEqual(len(calls), 1)
        self.assertEqual(calls[0].event_name, 'Settle')
        self.assertEqual(calls[0].encode_args, 'address(token), balances[user], getAmount(x, y)')
        self.assertEqual(calls[0].line_number, 3)

    def test_calls_without_abi_encode_are_ignored(self):
        self.assertEqual(extract_log_event_calls('_logEvent("X", data);'), [])

    def test_empty_encode(self):
        calls = extract_log_event_calls('_logEvent("Ping", abi.encode());')
        self.assertEqual(calls[0].encode_args, '')
        self.assertEqual(split_encode_args(calls[0].encode_args), [])

    def test_split_respects_nesting(self):
        self.assertEqual(
            split_encode_args('a, f(b, c), d[e, f], g'),
            ['a', 'f(b, c)', 'd[e, f]', 'g'],
        )

    def test_split_drops_empty_segments(self):
        self.assertEqual(split_encode_args('a, , b,'), ['a', 'b'])


class TestDeclarationTables(unittest.TestCase):
    """Test struct, function, local variable and mapping scanners."""

    def test_parse_structs(self):
        source = '''
        struct Position {
            address trader;
            uint256[] sizes;
            bytes32 key;
        }
        '''
        structs = parse_structs(source)
        self.assertIn('Position', structs)
        fields = [(f.type, f.name) for f in structs['Position'].fields]
        self.assertEqual(fields, [('address', 'trader'), ('uint256[]', 'sizes'), ('bytes32', 'key')])
        self.assertEqual(structs['Position'].field_type('key'), 'bytes32')
        self.assertIsNone(structs['Position'].field_type('missing'))

    def test_function_params_and_named_returns(self):
        source = '''
        function settle(
            IERC20 token,
            CallParams calldata params,
            address[] memory users
        ) external returns (uint256 amount, bool ok) {
        }
        '''
        params = parse_function_signatures(source)['settle']
        self.assertEqual(params['token'], 'IERC20')
        self.assertEqual(params['params'], 'CallParams')
        self.assertEqual(params['users'], 'address[]')
        self.assertEqual(params['amount'], 'uint256')
        self.assertEqual(params['ok'], 'bool')

    def test_unnamed_returns_are_ignored(self):
        source = 'function total(uint256 a) public view returns (uint256) {}'
        self.assertEqual(parse_function_signatures(source)['total'], {'a': 'uint256'})

    def test_function_without_params(self):
        self.assertEqual(parse_function_signatures('function ping() external {}'), {'ping': {}})

    def test_local_variables(self):
        body = '''
            uint256 fee = amount / 100;
            Position memory position = positions[key];
            address recipient;
            return value;
        '''
        local_vars = parse_local_variables(body)
        self.assertEqual(local_vars['fee'], 'uint256')
        self.assertEqual(local_vars['position'], 'Position')
        self.assertEqual(local_vars['recipient'], 'address')
        self.assertNotIn('value', local_vars)

    def test_mapping_declarations(self):
        source = '''
        mapping(address => uint256) public balances;
        mapping(bytes32 => Position) positions;
        '''
        self.assertEqual(
            parse_mapping_declarations(source),
            {'balances': 'uint256', 'positions': 'Position'},
        )


class TestErrorDefinitions(unittest.TestCase):
    """Test custom error ABI extraction."""

    def test_puppet_errors(self):
        source = '''
        library Error {
            error Allocate__Unauthorized();
            error Allocate__InsufficientBalance(uint available, uint required);
            error TokenRouter__EmptyTokenTranferAllowance(IERC20 token);
        }
        '''
        errors = parse_error_definitions(source)
        self.assertEqual(errors[0], {'type': 'error', 'name': 'Allocate__Unauthorized', 'inputs': []})
        self.assertEqual(errors[1]['inputs'], [
            {'name': 'available', 'internalType': 'uint256', 'type': 'uint256'},
            {'name': 'required', 'internalType': 'uint256', 'type': 'uint256'},
        ])
        self.assertEqual(errors[2]['inputs'], [
            {'name': 'token', 'internalType': 'contract IERC20', 'type': 'address'},
        ])
        self.assertEqual(list(errors[0].keys()), ['type', 'name', 'inputs'])

    def test_unnamed_puppet_params_drop_inputs(self):
        errors = parse_error_definitions('error Bad(uint256);')
        self.assertEqual(errors, [{'type': 'error', 'name': 'Bad'}])

    def test_gmx_errors_are_sorted_and_named(self):
        source = '''
        error Unauthorized(address msgSender, string role);
        error EmptyMarket();
        error InvalidFeeFactor(uint, int);
        error adlDisabled();
        '''
        errors = parse_gmx_error_definitions(source)
        self.assertEqual([e['name'] for e in errors],
                         ['adlDisabled', 'EmptyMarket', 'InvalidFeeFactor', 'Unauthorized'])
        fee = next(e for e in errors if e['name'] == 'InvalidFeeFactor')
        self.assertEqual(fee['inputs'], [
            {'internalType': 'uint256', 'type': 'uint256', 'name': 'param0'},
            {'internalType': 'int256', 'type': 'int256', 'name': 'param1'},
        ])
        self.assertEqual(list(fee.keys()), ['name', 'type', 'inputs'])

    def test_locale_sort_key(self):
        self.assertEqual(sorted(['beta', 'Alpha', 'alpha', 'Beta'], key=locale_sort_key),
                         ['alpha', 'Alpha', 'beta', 'Beta'])

    def test_locale_sort_key_punctuation_and_digits(self):
        self.assertEqual(sorted(['AB', 'A1', 'A_B'], key=locale_sort_key), ['A_B', 'A1', 'AB'])
        self.assertEqual(sorted(['Vault__Paused', 'Vault2', 'VaultA', 'Vault'], key=locale_sort_key),
                         ['Vault', 'Vault__Paused', 'Vault2', 'VaultA'])


if __name__ == '__main__':
    unittest.main()
