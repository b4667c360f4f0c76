class NodeVisitor:
    def visit(self, node):
        """dispatches on the node class name
        """
        method_name = 'visit_' + type(node).__name__
        visitor = getattr(self, method_name, self.generic_visit)
        return visitor(node)

    def generic_visit(self, node):
        raise NotImplementedError(f'No visit_{type(node).__name__} method')
